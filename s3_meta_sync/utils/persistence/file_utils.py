"""
File system utilities

All reads and writes are binary; content is never decoded.
"""
import hashlib
import os

CHUNK_SIZE = 1024 * 1024


def ensure_dir(directory):
    """
    Ensure directory exists, create if it doesn't.

    Args:
        directory: Directory path
    """
    if directory:
        os.makedirs(directory, exist_ok=True)


def local_path(root, relative_path):
    """
    Join a forward-slash relative path onto a local root.

    Args:
        root: Local tree root
        relative_path: Path below *root*

    Returns:
        Joined filesystem path

    Raises:
        ValueError: If the result would point outside *root*
    """
    path = os.path.join(root, *relative_path.split("/"))
    base = os.path.abspath(root)
    if os.path.commonpath([base, os.path.abspath(path)]) != base:
        raise ValueError(f"'{relative_path}' points outside {root}")
    return path


def read_bytes(filepath):
    """Read a file as raw bytes."""
    with open(filepath, 'rb') as f:
        return f.read()


def write_bytes(filepath, data):
    """
    Write raw bytes to a file, creating parent directories.

    Args:
        filepath: Target path
        data: Content bytes
    """
    ensure_dir(os.path.dirname(filepath))
    with open(filepath, 'wb') as f:
        f.write(data)


def md5_file(filepath):
    """
    Compute the MD5 hex digest of a file's bytes.

    Args:
        filepath: Path to file

    Returns:
        32 character lowercase hex digest
    """
    digest = hashlib.md5()
    with open(filepath, 'rb') as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
            digest.update(chunk)
    return digest.hexdigest()


def walk_tree(root):
    """
    List regular files and directories under *root*.

    Args:
        root: Directory to walk

    Returns:
        Tuple of (files, directories) as forward-slash relative paths
    """
    files = []
    directories = []

    for current, dirs, filenames in os.walk(root):
        rel_dir = os.path.relpath(current, root)
        prefix = "" if rel_dir == os.curdir else rel_dir.replace(os.sep, "/") + "/"

        for name in dirs:
            if not os.path.islink(os.path.join(current, name)):
                directories.append(prefix + name)
        for name in filenames:
            if os.path.isfile(os.path.join(current, name)):
                files.append(prefix + name)

    return files, directories
