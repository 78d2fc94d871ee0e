from scrapbook_viewer.core.image_codec import decode_image


def test_decode_png(png_bytes):
    image = decode_image(png_bytes)
    assert image is not None
    assert (image.width(), image.height()) == (6, 4)


def test_decode_garbage_returns_none():
    assert decode_image(b"<html>not an image</html>") is None


def test_decode_empty_returns_none():
    assert decode_image(b"") is None


def test_decode_keeps_alpha():
    import cv2
    import numpy as np

    bgra = np.zeros((3, 5, 4), dtype=np.uint8)
    bgra[0, 0] = (0, 0, 255, 255)
    ok, buf = cv2.imencode(".png", bgra)
    assert ok

    image = decode_image(buf.tobytes())
    assert image is not None
    assert image.hasAlphaChannel()
    assert image.pixelColor(1, 1).alpha() == 0
    corner = image.pixelColor(0, 0)
    assert (corner.red(), corner.alpha()) == (255, 255)


def test_decode_grayscale_png():
    import cv2
    import numpy as np

    ok, buf = cv2.imencode(".png", np.full((2, 3), 90, dtype=np.uint8))
    assert ok
    image = decode_image(buf.tobytes())
    assert (image.width(), image.height()) == (3, 2)
    assert image.pixelColor(0, 0).red() == 90
