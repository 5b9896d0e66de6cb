"""Extension-based MIME type lookup."""

from __future__ import annotations

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = {
    # Text
    "txt": "text/plain",
    "md": "text/markdown",
    "json": "application/json",
    "xml": "application/xml",
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "csv": "text/csv",
    # Code
    "js": "text/javascript",
    "jsx": "text/javascript",
    "ts": "text/typescript",
    "tsx": "text/typescript",
    "py": "text/x-python",
    "rb": "text/x-ruby",
    "java": "text/x-java",
    "c": "text/x-c",
    "cpp": "text/x-c++",
    "h": "text/x-c",
    "hpp": "text/x-c++",
    "go": "text/x-go",
    "rs": "text/x-rust",
    "swift": "text/x-swift",
    "kt": "text/x-kotlin",
    "scala": "text/x-scala",
    "php": "text/x-php",
    "sh": "text/x-shellscript",
    "bash": "text/x-shellscript",
    "zsh": "text/x-shellscript",
    "yaml": "text/yaml",
    "yml": "text/yaml",
    "toml": "text/x-toml",
    "sql": "text/x-sql",
    # Images
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "bmp": "image/bmp",
    # Audio
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    # Video
    "mp4": "video/mp4",
    "webm": "video/webm",
    # Documents
    "pdf": "application/pdf",
}

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".svg", ".ico")


def guess_mime_type(filename: str) -> str:
    """Return the MIME type for ``filename`` based on its extension."""
    name = filename.lower()
    if "." not in name:
        return DEFAULT_MIME_TYPE
    ext = name.rsplit(".", 1)[-1]
    return MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


def is_image_file(filename: str, mime_type: str) -> bool:
    return filename.lower().endswith(IMAGE_EXTENSIONS) or mime_type.startswith("image/")


def is_binary_mime_type(mime_type: str) -> bool:
    """True for MIME types served as base64 blobs rather than text."""
    return (
        mime_type.startswith(("image/", "audio/", "video/"))
        or mime_type == "application/pdf"
        or mime_type == DEFAULT_MIME_TYPE
    )
