"""
Configuration constants for the media sorter.
"""

# --- Scan Filtering ---
# Entries whose name matches exactly are never scanned
IGNORED_NAMES = {'.DS_Store', 'Thumbs.db', 'desktop.ini'}
# AppleDouble resource forks ("._IMG_0001.JPG") created on non-HFS volumes
IGNORED_PREFIXES = ('._',)

# --- Metadata Parsing ---
# Only these formats are opened to look for an embedded capture date
CAPTURE_MIME_TYPES = {'image/jpeg', 'image/tiff'}

# exifread names the tag after the IFD it was found in
CAPTURE_DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'Image DateTimeOriginal',
]
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# Extensions missing from the interpreter's default MIME table.
# RAW formats are registered as images so they group with their JPEGs.
EXTRA_MIME_TYPES = {
    'dng': 'image/x-adobe-dng',
    'cr2': 'image/x-canon-cr2',
    'cr3': 'image/x-canon-cr3',
    'crw': 'image/x-canon-crw',
    'nef': 'image/x-nikon-nef',
    'nrw': 'image/x-nikon-nrw',
    'arw': 'image/x-sony-arw',
    'srf': 'image/x-sony-srf',
    'orf': 'image/x-olympus-orf',
    'rw2': 'image/x-panasonic-rw2',
    'raf': 'image/x-fuji-raf',
    'pef': 'image/x-pentax-pef',
    'heic': 'image/heic',
    'heif': 'image/heif',
    'webp': 'image/webp',
    'avif': 'image/avif',
    'psd': 'image/vnd.adobe.photoshop',
    'm4v': 'video/x-m4v',
    'mts': 'video/mp2t',
    'm2ts': 'video/mp2t',
    '3gp': 'video/3gpp',
    'mkv': 'video/x-matroska',
    'webm': 'video/webm',
    'm4a': 'audio/mp4',
    'flac': 'audio/flac',
    'aac': 'audio/aac',
    'ogg': 'audio/ogg',
    'opus': 'audio/ogg',
    'xmp': 'application/rdf+xml',
    'aae': 'application/xml',
    'gz': 'application/gzip',
}

# --- Organization ---
TYPE_DIR_NAMES = {
    'image': 'Image',
    'video': 'Video',
    'audio': 'Audio',
    'other': 'Other',
}
FALLBACK_TYPE_DIR = 'Other'
DATE_DIR_FORMAT = "%Y-%m-%d"

# --- Performance ---
# Extraction is I/O bound; a handful of threads keeps a spinning disk busy
# without thrashing it.
DEFAULT_MAX_WORKERS = 8
