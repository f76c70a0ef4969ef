# type: ignore
import pytest

from xvm.runtime.screen import Screen, grayscale_palette

from fixtures import clock, screen  # noqa: F401


def test_set_and_clear(screen):  # noqa: F811
    screen.set_pixel(15, 7, 200)

    assert screen.get_pixel(15, 7) == 200
    assert screen.fb[7 * 16 + 15] == 200

    screen.clear()

    assert not any(screen.fb)


def test_palette_index_truncated(screen):  # noqa: F811
    screen.set_pixel(0, 0, 0x1FF)

    assert screen.get_pixel(0, 0) == 0xFF


def test_rate_limited_update(screen, clock):  # noqa: F811
    assert screen.update()
    assert not screen.update()

    clock.advance(10)
    assert not screen.update()

    clock.advance(6)
    assert screen.update()
    assert screen.flushes == 2


def test_flush_callback(clock):  # noqa: F811
    frames = []
    screen = Screen(2, 2, on_flush=lambda f, w, h: frames.append((f, w, h)), clock=clock)
    screen.set_pixel(1, 0, 0x10)
    screen.update()

    assert frames == [([0, 0x101010, 0, 0], 2, 2)]


def test_palette(screen):  # noqa: F811
    palette = [0xFF0000] * 256
    screen.set_palette(palette)
    screen.set_pixel(0, 0, 3)

    assert screen.frame()[0] == 0xFF0000

    with pytest.raises(UserWarning):
        screen.set_palette([0] * 8)


def test_grayscale_palette():
    palette = grayscale_palette()

    assert len(palette) == 256
    assert palette[0] == 0
    assert palette[255] == 0xFFFFFF


def test_render_text(clock):  # noqa: F811
    screen = Screen(4, 3, clock=clock)
    screen.set_pixel(0, 0, 255)
    screen.set_pixel(2, 1, 255)

    assert screen.render_text() == '@\n  @'


def test_close(screen):  # noqa: F811
    assert screen.is_open()
    screen.close()
    assert not screen.is_open()
