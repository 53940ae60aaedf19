import io

from PIL import Image

from cached_image.errors import DecodingError, NetworkError
from cached_image.infrastructure.decoding import decode_image
from cached_image.state import Failed, Idle, Loaded, Loading, NoURL


def _png(color):
    buffer = io.BytesIO()
    Image.new("RGB", (3, 3), color).save(buffer, "PNG")
    return buffer.getvalue()


def test_unit_states_equal_their_own_kind():
    assert Idle() == Idle()
    assert Loading() == Loading()
    assert NoURL() == NoURL()
    assert Idle() != Loading()
    assert NoURL() != Idle()


def test_loaded_compares_by_encoded_pixels_not_identity():
    data = _png((1, 2, 3))

    first = Loaded(decode_image(data))
    second = Loaded(decode_image(data))

    assert first.image is not second.image
    assert first == second
    assert Loaded(decode_image(_png((9, 9, 9)))) != first


def test_failed_ignores_error_payload():
    assert Failed(NetworkError(ConnectionError("down"))) == Failed(DecodingError("bad"))
    assert Failed(DecodingError()) != Loading()


def test_loaded_and_failed_are_distinct():
    assert Loaded(Image.new("RGB", (1, 1))) != Failed(DecodingError())


def _cmyk_jpeg():
    buffer = io.BytesIO()
    Image.new("CMYK", (4, 4), (10, 200, 30, 0)).save(buffer, "JPEG")
    return buffer.getvalue()


def test_loaded_compares_cmyk_sources():
    data = _cmyk_jpeg()

    assert Loaded(decode_image(data)) == Loaded(decode_image(data))
    assert Loaded(Image.new("CMYK", (2, 2))) == Loaded(Image.new("CMYK", (2, 2)))


def test_loaded_hash_agrees_with_equality():
    data = _png((1, 2, 3))
    first = Loaded(decode_image(data))
    second = Loaded(decode_image(data))

    assert hash(first) == hash(second)
    assert len({first, second, Loaded(decode_image(_png((4, 5, 6))))}) == 2
