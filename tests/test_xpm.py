import pytest

from raycub.colors import lookup_color
from raycub.xpm import (
    XpmError,
    load_xpm,
    split_words,
    strip_comments,
    text_to_rgb,
    xpm_from_data,
)

SAMPLE = [
    "3 2 3 1",
    "r c #FF0000",
    "g c green",
    ". c None",
    "rg.",
    ".gr",
]


def test_split_words_spaces_and_tabs():
    assert split_words("  a\tb   c \t") == ["a", "b", "c"]
    assert split_words(" \t ") == []


def test_strip_comments_keeps_length_and_removes_block():
    text = 'static char *x[] = { /* hidden "q" */ "abc" };'
    out = strip_comments(text)
    assert len(out) == len(text)
    assert "hidden" not in out
    assert '"abc"' in out


def test_strip_comments_ignores_markers_inside_quotes():
    text = '"a /* b */ c"\n'
    assert strip_comments(text) == text


def test_strip_comments_line_comment():
    text = '"x" // note\n"y"'
    out = strip_comments(text)
    assert "note" not in out
    assert out.endswith('"y"')
    assert len(out) == len(text)


def test_text_to_rgb_hex():
    assert text_to_rgb("#FF0000", None) == 0xFF0000
    assert text_to_rgb("#00ff00", "ignored") == 0x00FF00


def test_text_to_rgb_names():
    assert text_to_rgb("light", "grey") == lookup_color("light grey")
    assert text_to_rgb("White", None) == lookup_color("white")
    assert text_to_rgb("None", None) == -1


def test_text_to_rgb_unknown_is_black():
    assert text_to_rgb("nosuchcolour", None) == 0


def test_xpm_from_data_pixels():
    image = xpm_from_data(SAMPLE)
    assert (image.width, image.height) == (3, 2)
    assert image.get_pixel(0, 0) == 0xFF0000
    assert image.get_pixel(1, 0) == lookup_color("green")
    assert image.get_pixel(2, 0) == 0xFF000000
    assert image.get_pixel(0, 1) == 0xFF000000
    assert image.get_pixel(2, 1) == 0xFF0000


def test_xpm_two_chars_per_pixel():
    data = ["2 1 2 2", "aa c #0000FF", "ab c red", "abaa"]
    image = xpm_from_data(data)
    assert image.get_pixel(0, 0) == lookup_color("red")
    assert image.get_pixel(1, 0) == 0x0000FF


def test_undefined_key_reads_black():
    image = xpm_from_data(["2 1 1 1", "x c white", "xz"])
    assert image.get_pixel(0, 0) == lookup_color("white")
    assert image.get_pixel(1, 0) == 0


@pytest.mark.parametrize(
    "data",
    [
        ["0 2 1 1", "x c red", "x", "x"],
        ["2 2 1", "x c red"],
        ["a b c d"],
        [],
        ["1 1 1 1", "x s red", "x"],
        ["1 1 1 1", "x c", "x"],
        ["1 2 1 1", "x c red", "x"],
    ],
)
def test_malformed_data_raises(data):
    with pytest.raises(XpmError):
        xpm_from_data(data)


def test_load_xpm_file_matches_data(tmp_path):
    body = "/* XPM */\nstatic char *pic[] = {\n/* size */\n"
    body += ",\n".join(f'"{line}"' for line in SAMPLE)
    body += "\n}; // end\n"
    path = tmp_path / "pic.xpm"
    path.write_text(body)
    loaded = load_xpm(path)
    direct = xpm_from_data(SAMPLE)
    assert (loaded.width, loaded.height) == (direct.width, direct.height)
    assert loaded.data == direct.data


def test_load_xpm_missing_file(tmp_path):
    with pytest.raises(XpmError):
        load_xpm(tmp_path / "absent.xpm")