import logging
from datetime import MAXYEAR, MINYEAR, datetime, timezone
from typing import BinaryIO, Optional

import exifread

from .. import config
from ..exceptions import MetadataError


class ExifMetadataReader:
    """
    Reads the original capture date out of JPEG/TIFF files using 'exifread'.
    """

    def parse_capture_date(self, fh: BinaryIO) -> Optional[datetime]:
        """
        Returns DateTimeOriginal as an aware datetime in local time, or None
        when the file has no usable value for it.

        Raises MetadataError if exifread cannot parse the data at all.
        """
        try:
            # details=False skips maker notes and thumbnails
            tags = exifread.process_file(fh, details=False)
        except OSError:
            raise
        except Exception as e:
            raise MetadataError(f"Unreadable EXIF data: {e}") from e

        return self._parse_exif_date(tags)

    def _parse_exif_date(self, tags) -> Optional[datetime]:
        for tag in config.CAPTURE_DATE_TAGS:
            if tag not in tags:
                continue
            raw = str(tags[tag]).strip().rstrip('\x00')
            # Cameras without a set clock write blanks or zeros
            if not raw or raw.startswith('0000'):
                return None
            try:
                # EXIF format is "YYYY:MM:DD HH:MM:SS", possibly with sub-seconds
                dt = datetime.strptime(raw[:19], config.EXIF_DATE_FORMAT)
            except ValueError:
                logging.debug(f"Ignoring malformed {tag} value {raw!r}")
                continue
            # Reset clocks land on the edges of the calendar, where shifting
            # by the local offset leaves the range datetime can represent
            if dt.year in (MINYEAR, MAXYEAR):
                logging.debug(f"Ignoring out-of-range {tag} value {raw!r}")
                return None
            try:
                # EXIF stores wall-clock time without a zone: read it as local time
                local = dt.astimezone()
                local.astimezone(timezone.utc)
            except (ValueError, OverflowError, OSError) as e:
                logging.debug(f"Ignoring unconvertible {tag} value {raw!r}: {e}")
                return None
            return local
        return None
