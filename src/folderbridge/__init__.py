"""folderbridge - path-addressed bridge over user-granted directories.

A host application registers directories the user explicitly granted access
to, and tools (read, write, edit, glob, grep) operate on them through stable
virtual paths such as ``/<folder-name>/src/main.py``:
- Capabilities persist across restarts without being serialized by callers
- Trees are materialized eagerly or one level at a time
- Write-path operations broadcast change events to subscribers
"""

__version__ = "0.1.0"
