import mimetypes
from typing import Optional

from .. import config


class MimeTypeLookup:
    """
    Static extension -> MIME table.

    Built from the interpreter's bundled defaults only (never the host's
    /etc/mime.types), so the same file classifies the same way everywhere.
    """

    def __init__(self, extra_types: Optional[dict] = None):
        self._db = mimetypes.MimeTypes()
        for ext, mime_type in (extra_types if extra_types is not None else config.EXTRA_MIME_TYPES).items():
            self._db.add_type(mime_type, '.' + ext.lower())

    def mime_for(self, extension: str) -> Optional[str]:
        if not extension:
            return None
        suffix = '.' + extension.lower()
        strict, loose = self._db.types_map[True], self._db.types_map[False]
        return strict.get(suffix) or loose.get(suffix)
