from .errors import (
    FormatRejection,
    DecodeError,
    CannotReadFile,
    InvalidSampleFormat,
    CannotAllocateMemory,
    MalformedStream,
    MalformedBuffer,
    CannotCreateBuffer,
)
from .format_descriptor import (
    NATIVE_BYTE_ORDER,
    LINEAR_PCM_FORMAT_ID,
    IMA4_FORMAT_ID,
    SampleEncoding,
    FormatDescriptor,
)
from .format_validator import validate_format
from .ima4_adpcm import Ima4Packet, Ima4AdpcmDecoder, decode_ima4
from .sample_buffer import SampleFormat, SampleBuffer
from .media_file import MediaFile, read_media_file
from .sample_decoder import SampleDecoder, decode_sample
from .settings import Settings, load_settings
