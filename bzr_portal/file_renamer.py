import logging
import os

from .slug import needs_transliteration, transliterate

logger = logging.getLogger(__name__)

def _rename(directory: str, name: str) -> str:
    """Vraća putanju pod kojom stavka postoji posle (eventualnog) preimenovanja."""
    old_path = os.path.join(directory, name)
    if not needs_transliteration(name):
        return old_path
    new_name = transliterate(name)
    new_path = os.path.join(directory, new_name)
    if os.path.exists(new_path):
        logger.warning("Preskačem %s: %s već postoji", old_path, new_name)
        return old_path
    os.rename(old_path, new_path)
    logger.info("Preimenovano: %s -> %s", name, new_name)
    return new_path

def transliterate_tree(directory: str, recursive: bool = True) -> int:
    """
    Preimenuje fajlove i direktorijume sa ćiriličnim/dijakritičkim imenima.
    Direktorijum se preimenuje pre obilaska. Vraća broj preimenovanih stavki.
    """
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Direktorijum ne postoji: {directory}")

    renamed = 0
    for name in sorted(os.listdir(directory)):
        path = os.path.join(directory, name)
        is_dir = os.path.isdir(path)
        if is_dir and not recursive:
            continue

        new_path = _rename(directory, name)
        if new_path != path:
            renamed += 1
        if is_dir:
            renamed += transliterate_tree(new_path, recursive)
    return renamed
