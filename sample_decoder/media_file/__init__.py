from .layout import MediaLayout
from .media_file import MediaFile, read_media_file, read_media_layout, read_media_data
