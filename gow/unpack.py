"""Archive extraction into the install root."""

from __future__ import annotations

import os
import posixpath
import re
import shutil
import tarfile
import zipfile
from pathlib import Path
from typing import List

from .console import log
from .constants import TAR_GZ_EXTENSION, ZIP_EXTENSION, ZIP_WRAPPER_DIR
from .errors import UnpackError, UnsupportedArchiveError

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")


def _normalize_member_path(member: str, archive: Path) -> str:
    normalized = (member or "").replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    if not normalized:
        return ""
    if normalized.startswith("/") or _DRIVE_PATTERN.match(normalized):
        raise UnpackError(f"archive entry contains an absolute path: {member!r} ({archive.name})")
    parts = [part for part in normalized.split("/") if part not in {"", "."}]
    if any(part == ".." for part in parts):
        raise UnpackError(f"archive entry attempts path traversal: {member!r} ({archive.name})")
    return "/".join(parts)


def _ensure_dirs(dest: Path, parts: List[str], archive: Path) -> Path:
    current = dest
    for part in parts:
        current = current / part
        if current.exists():
            if current.is_symlink():
                raise UnpackError(
                    f"refusing to extract into symlinked directory {current} ({archive.name})"
                )
            if not current.is_dir():
                raise UnpackError(
                    f"refusing to extract into non-directory {current} ({archive.name})"
                )
            continue
        current.mkdir()
    return current


def _target_within(dest: Path, relative_posix: str, archive: Path) -> Path:
    rel_path = Path(*[p for p in relative_posix.split("/") if p])
    target = dest / rel_path
    dest_real = dest.resolve()
    target_real = (dest_real / rel_path).resolve()
    if dest_real != target_real and dest_real not in target_real.parents:
        raise UnpackError(f"archive entry escapes destination: {relative_posix!r} ({archive.name})")
    return target


def _check_link_target(entry: str, linkname: str, archive: Path) -> str:
    normalized = (linkname or "").replace("\\", "/").strip()
    if normalized.startswith("/") or _DRIVE_PATTERN.match(normalized):
        raise UnpackError(
            f"refusing to extract absolute link target {linkname!r} ({archive.name})"
        )
    combined = posixpath.normpath(posixpath.join(posixpath.dirname(entry), normalized))
    if combined == ".." or combined.startswith("../"):
        raise UnpackError(
            f"refusing to extract link escaping destination: {entry!r} -> {linkname!r} ({archive.name})"
        )
    return normalized


def _write_member(source, target: Path, mode: int, archive: Path) -> None:
    if target.is_symlink():
        raise UnpackError(f"refusing to overwrite symlink {target} ({archive.name})")
    with source, target.open("wb") as out:
        shutil.copyfileobj(source, out)
    if mode:
        try:
            os.chmod(target, mode & 0o777)
        except OSError:
            pass


def remove_stale_entries(root: Path, archive: Path) -> None:
    """Delete direct children of root that do not share the archive's extension."""
    suffix = archive.suffix
    for entry in root.iterdir():
        if entry.name == archive.name or (suffix and entry.name.endswith(suffix)):
            continue
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()


def unpack_tar_gz(root: Path, archive: Path) -> None:
    """Extract a .tar.gz into root, dropping the first path component of each entry."""
    with tarfile.open(archive, mode="r:gz") as tf:
        for member in tf:
            parts = _normalize_member_path(member.name, archive).split("/")[1:]
            if not parts:
                continue
            entry = "/".join(parts)
            target = _target_within(root, entry, archive)

            if member.isdir():
                _ensure_dirs(root, parts, archive)
                continue
            _ensure_dirs(root, parts[:-1], archive)

            if member.issym():
                linkname = _check_link_target(entry, member.linkname, archive)
                if target.exists() or target.is_symlink():
                    target.unlink()
                os.symlink(linkname, target)
                continue

            if member.islnk():
                # Hard link targets name archive paths, so they lose the same component.
                source_parts = _normalize_member_path(member.linkname, archive).split("/")[1:]
                if not source_parts:
                    raise UnpackError(f"hardlink {entry!r} has no target ({archive.name})")
                source = _target_within(root, "/".join(source_parts), archive)
                if not source.exists():
                    raise UnpackError(
                        f"hardlink target missing while extracting {entry!r} ({archive.name})"
                    )
                if target.exists():
                    target.unlink()
                os.link(source, target)
                continue

            if not member.isreg():
                raise UnpackError(f"unsupported archive entry type for {entry!r} ({archive.name})")
            file_obj = tf.extractfile(member)
            if file_obj is None:
                continue
            _write_member(file_obj, target, member.mode, archive)


def unpack_zip(root: Path, archive: Path) -> None:
    """Extract the go/ tree of a zip into root and lift its contents one level."""
    found = False
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            entry = _normalize_member_path(info.filename, archive)
            parts = entry.split("/") if entry else []
            if len(parts) < 2 or parts[0] != ZIP_WRAPPER_DIR:
                continue
            found = True
            target = _target_within(root, entry, archive)
            if info.is_dir():
                _ensure_dirs(root, parts, archive)
                continue
            _ensure_dirs(root, parts[:-1], archive)
            _write_member(zf.open(info, "r"), target, (info.external_attr >> 16) & 0o777, archive)

    if not found:
        raise UnpackError(f"no {ZIP_WRAPPER_DIR}/ entries in {archive.name}")

    # Rename first so a child that is itself named like the wrapper can move up.
    staging = root / f".{ZIP_WRAPPER_DIR}-unpack"
    (root / ZIP_WRAPPER_DIR).rename(staging)
    for item in staging.iterdir():
        destination = root / item.name
        if destination.exists():
            raise UnpackError(f"cannot move {item.name} into {root}: destination exists")
        shutil.move(str(item), str(destination))
    staging.rmdir()


def unpack_archive(root: Path, archive: Path) -> None:
    """Clear stale entries from root and extract archive into it."""
    log(f"Unpacking {archive} ...")
    try:
        remove_stale_entries(root, archive)
        if archive.name.endswith(ZIP_EXTENSION):
            unpack_zip(root, archive)
        elif archive.name.endswith(TAR_GZ_EXTENSION):
            unpack_tar_gz(root, archive)
        else:
            raise UnsupportedArchiveError("unsupported archive file")
    except UnpackError as exc:
        raise type(exc)(f"extracting archive {archive}: {exc}") from exc
    except (zipfile.BadZipFile, tarfile.TarError, OSError) as exc:
        raise UnpackError(f"extracting archive {archive}: {exc}") from exc
