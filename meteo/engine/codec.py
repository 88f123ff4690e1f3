"""
Wire Codec - Conversion between weather messages and datagram bytes

Request layout (variable length, >= 1 byte):

    offset 0      1 byte   type character
    offset 1..N   city bytes (0..63)
    offset N+1    0x00 terminator (sent by clients, not required by servers)

Response layout (fixed 9 bytes, network byte order):

    offset 0-3    uint32   status
    offset 4      1 byte   echoed type, 0x00 unless status == SUCCESS
    offset 5-8    uint32   IEEE-754 bit pattern of the float32 value

Encoding always appends the request terminator while decoding never requires
it: a server has to accept whatever datagram length arrives, so the city is
simply everything after the type byte up to the first null.
"""
import struct

from meteo.exceptions import MalformedRequestError, TruncatedResponseError
from meteo.models import Status, WeatherRequest, WeatherResponse

CITY_NAME_LEN = 64
MAX_CITY_BYTES = CITY_NAME_LEN - 1
REQUEST_MIN_SIZE = 1
RESPONSE_SIZE = 9

NULL_TYPE = "\x00"

_UINT32 = struct.Struct(">I")
_FLOAT32 = struct.Struct(">f")
_RESPONSE = struct.Struct(">IcI")


def float_to_network_bits(value: float) -> int:
    """
    Reinterpret a float32 as the unsigned integer holding its bit pattern.

    This is a bit copy, not a numeric cast: NaN, infinities and -0.0 keep
    their exact representation.
    """
    return _UINT32.unpack(_FLOAT32.pack(value))[0]


def network_bits_to_float(bits: int) -> float:
    """Inverse of float_to_network_bits."""
    return _FLOAT32.unpack(_UINT32.pack(bits))[0]


def encode_type(measurement_type: str) -> bytes:
    return measurement_type.encode("latin-1")


def encode_request(measurement_type: str, city: str | bytes) -> bytes:
    """
    Encode a request datagram.

    Args:
        measurement_type: Single character; its validity is not checked here
        city: City name, text (UTF-8 encoded) or raw bytes, under 64 bytes

    Returns:
        ``type + city + b"\\x00"``
    """
    city_bytes = city.encode("utf-8") if isinstance(city, str) else bytes(city)
    if len(city_bytes) >= CITY_NAME_LEN:
        # Callers bound the city first; keep the datagram within the field size
        city_bytes = city_bytes[:MAX_CITY_BYTES]
    return encode_type(measurement_type) + city_bytes + b"\x00"


def decode_request(data: bytes, received_len: int | None = None) -> WeatherRequest:
    """
    Decode a request datagram.

    Args:
        data: Receive buffer
        received_len: Number of valid bytes in ``data`` (defaults to all of it)

    Returns:
        WeatherRequest with the city cut at 63 bytes and at the first null

    Raises:
        MalformedRequestError: If fewer than one byte was received
    """
    if received_len is None:
        received_len = len(data)
    received_len = min(received_len, len(data))

    if received_len < REQUEST_MIN_SIZE:
        raise MalformedRequestError(
            "Request datagram is empty",
            details={"received_len": received_len},
        )

    measurement_type = chr(data[0])
    city = bytes(data[1:received_len][:MAX_CITY_BYTES])
    terminator = city.find(b"\x00")
    if terminator != -1:
        city = city[:terminator]

    return WeatherRequest(measurement_type=measurement_type, city=city)


def encode_response(status: int, measurement_type: str, value: float) -> bytes:
    """
    Encode a 9-byte response datagram.

    The type byte is forced to 0x00 for every non-success status. The value
    is written unchanged; receivers ignore it unless status is SUCCESS.
    """
    if status != Status.SUCCESS:
        measurement_type = NULL_TYPE
    return _RESPONSE.pack(
        int(status),
        encode_type(measurement_type),
        float_to_network_bits(value),
    )


def decode_response(data: bytes, received_len: int | None = None) -> WeatherResponse:
    """
    Decode a response datagram without validating its contents.

    Raises:
        TruncatedResponseError: If fewer than 9 bytes were received
    """
    if received_len is None:
        received_len = len(data)
    received_len = min(received_len, len(data))

    if received_len < RESPONSE_SIZE:
        raise TruncatedResponseError(
            f"Response datagram too short ({received_len} of {RESPONSE_SIZE} bytes)",
            details={"received_len": received_len, "expected": RESPONSE_SIZE},
        )

    status, raw_type, bits = _RESPONSE.unpack_from(data, 0)
    return WeatherResponse(
        status=status,
        echoed_type=raw_type.decode("latin-1"),
        value=network_bits_to_float(bits),
    )
