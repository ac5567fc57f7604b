"""Tests for reading and writing tags in image metadata."""

import warnings

import pytest
from PIL import Image

from photo_tagger.tags.codec import (
    EXIF_IFD_POINTER,
    USER_COMMENT,
    ImageKind,
    classify,
    collect_all_tags,
    decode_comment,
    encode_comment,
    find_images_with_tag,
    is_image_file,
    is_supported_format,
    load_tags,
    save_tags,
)
from photo_tagger.tags.errors import TagWriteError, UnsupportedFormatError


class TestClassify:
    @pytest.mark.parametrize("name", ["a.png", "a.jpg", "a.jpeg", "a.webp", "A.JPG", "b.PnG"])
    def test_taggable(self, name):
        assert classify(name) is ImageKind.TAGGABLE
        assert is_supported_format(name)
        assert is_image_file(name)

    @pytest.mark.parametrize("name", ["a.gif", "a.bmp", "a.GIF"])
    def test_viewable_only(self, name):
        assert classify(name) is ImageKind.VIEWABLE
        assert is_image_file(name)
        assert not is_supported_format(name)

    @pytest.mark.parametrize("name", ["a.txt", "a.tiff", "jpg", "noext"])
    def test_not_an_image(self, name):
        assert classify(name) is ImageKind.NOT_AN_IMAGE
        assert not is_image_file(name)


class TestDecodeComment:
    def test_plain_utf8(self):
        assert decode_comment(b"tag1;tag2") == ["tag1", "tag2"]

    def test_ascii_marker(self):
        assert decode_comment(b"ASCII\x00\x00\x00tag1;tag2") == ["tag1", "tag2"]

    def test_unicode_marker_with_interleaved_nuls(self):
        raw = b"UNICODE\x00" + "cat;dog".encode("utf-16-le")
        assert decode_comment(raw) == ["cat", "dog"]

    def test_trims_and_drops_empty_pieces(self):
        assert decode_comment(b"  a ; ;b;;  c  ") == ["a", "b", "c"]

    def test_keeps_duplicates(self):
        assert decode_comment(b"a;b;a") == ["a", "b", "a"]

    def test_invalid_utf8_is_replaced(self):
        tags = decode_comment(b"ok;\xff\xfe;fine")
        assert tags[0] == "ok"
        assert tags[-1] == "fine"
        assert len(tags) == 3

    def test_marker_without_payload(self):
        assert decode_comment(b"ASCII") == []

    def test_empty(self):
        assert decode_comment(b"") == []
        assert decode_comment(b"\x00\x00") == []

    def test_accepts_str(self):
        assert decode_comment("x;y") == ["x", "y"]

    def test_non_ascii_tags(self):
        assert decode_comment("風景;café".encode("utf-8")) == ["風景", "café"]


class TestEncodeComment:
    def test_joins_without_marker(self):
        assert encode_comment(["a", "b"]) == b"a;b"

    def test_empty(self):
        assert encode_comment([]) == b""


class TestLoadTags:
    def test_unsupported_format_returns_empty(self, make_image):
        path = make_image("pic.bmp")
        assert load_tags(path) == []

    def test_missing_file_returns_empty(self, tmp_path):
        assert load_tags(tmp_path / "missing.jpg") == []

    def test_corrupt_file_returns_empty(self, tmp_path):
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"\xff\xd8not really a jpeg")
        assert load_tags(path) == []

    def test_no_metadata_returns_empty(self, make_image):
        assert load_tags(make_image("plain.jpg")) == []

    def test_reads_legacy_ascii_comment(self, make_image):
        path = make_image("legacy.jpg", user_comment=b"ASCII\x00\x00\x00tag1;tag2")
        assert load_tags(path) == ["tag1", "tag2"]

    def test_reads_raw_utf8_comment(self, make_image):
        path = make_image("raw.jpg", user_comment=b"tag1;tag2")
        assert load_tags(path) == ["tag1", "tag2"]


class TestSaveTags:
    @pytest.mark.parametrize("name", ["pic.jpg", "pic.jpeg", "pic.png", "pic.webp"])
    def test_round_trip(self, make_image, name):
        path = make_image(name)
        tags = ["sunset", "beach trip", "家族"]
        save_tags(path, tags)
        assert load_tags(path) == tags

    @pytest.mark.parametrize("name", ["pic.jpg", "pic.png", "pic.webp"])
    @pytest.mark.parametrize("existing", [None, b"ASCII\x00\x00\x00old"])
    def test_written_exif_reads_back_without_warnings(self, make_image, name, existing):
        path = make_image(name, user_comment=existing)
        save_tags(path, ["a", "b"])
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert load_tags(path) == ["a", "b"]

    def test_animated_png_is_refused_unchanged(self, tmp_path):
        path = tmp_path / "anim.png"
        frames = [Image.new("RGB", (8, 8), color) for color in ("red", "green", "blue")]
        frames[0].save(path, save_all=True, append_images=frames[1:], duration=100)
        before = path.read_bytes()

        with pytest.raises(UnsupportedFormatError):
            save_tags(path, ["x"])
        assert path.read_bytes() == before
        with Image.open(path) as img:
            assert img.n_frames == 3

    def test_overwrites_previous_tags(self, make_image):
        path = make_image("pic.jpg")
        save_tags(path, ["a", "b"])
        save_tags(path, ["c"])
        assert load_tags(path) == ["c"]

    def test_empty_list_clears_tags(self, make_image):
        path = make_image("pic.png")
        save_tags(path, ["a"])
        save_tags(path, [])
        assert load_tags(path) == []

    def test_writes_without_charset_marker(self, make_image):
        path = make_image("pic.jpg")
        save_tags(path, ["a", "b"])
        with Image.open(path) as img:
            assert img.getexif().get_ifd(EXIF_IFD_POINTER)[USER_COMMENT] == b"a;b"

    def test_replaces_legacy_comment(self, make_image):
        path = make_image("legacy.jpg", user_comment=b"ASCII\x00\x00\x00old")
        save_tags(path, ["old", "new"])
        assert load_tags(path) == ["old", "new"]

    def test_preserves_other_exif(self, tmp_path):
        path = tmp_path / "camera.jpg"
        exif = Image.Exif()
        exif[0x010F] = "TestCam"  # Make
        exif[EXIF_IFD_POINTER] = {0x9003: "2020:01:02 03:04:05"}  # DateTimeOriginal
        Image.new("RGB", (8, 8), "blue").save(path, format="JPEG", exif=exif.tobytes())

        save_tags(path, ["kept"])
        with Image.open(path) as img:
            saved = img.getexif()
            assert saved[0x010F] == "TestCam"
            assert saved.get_ifd(EXIF_IFD_POINTER)[0x9003] == "2020:01:02 03:04:05"
        assert load_tags(path) == ["kept"]

    def test_jpeg_pixels_untouched(self, make_image):
        path = make_image("pic.jpg", color="green")
        with Image.open(path) as img:
            before = img.tobytes()
        save_tags(path, ["x"])
        with Image.open(path) as img:
            assert img.tobytes() == before

    def test_png_keeps_text_chunks(self, tmp_path):
        from PIL import PngImagePlugin

        path = tmp_path / "meta.png"
        info = PngImagePlugin.PngInfo()
        info.add_text("Author", "someone")
        Image.new("RGB", (8, 8)).save(path, pnginfo=info)

        save_tags(path, ["a"])
        with Image.open(path) as img:
            assert img.info.get("Author") == "someone"
        assert load_tags(path) == ["a"]

    def test_unsupported_format_leaves_file_unchanged(self, make_image):
        path = make_image("anim.gif")
        before = path.read_bytes()
        with pytest.raises(UnsupportedFormatError):
            save_tags(path, ["a"])
        assert path.read_bytes() == before

    def test_mismatched_content_is_unsupported(self, tmp_path):
        path = tmp_path / "really_a_bmp.jpg"
        Image.new("RGB", (8, 8)).save(path, format="BMP")
        before = path.read_bytes()
        with pytest.raises(UnsupportedFormatError):
            save_tags(path, ["a"])
        assert path.read_bytes() == before

    def test_missing_file_raises_write_error(self, tmp_path):
        with pytest.raises(TagWriteError):
            save_tags(tmp_path / "missing.jpg", ["a"])

    def test_corrupt_file_raises_write_error(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"garbage")
        with pytest.raises(TagWriteError):
            save_tags(path, ["a"])
        assert path.read_bytes() == b"garbage"

    def test_failed_replace_leaves_no_temp_file(self, make_image, monkeypatch):
        path = make_image("pic.jpg")
        before = path.read_bytes()

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("photo_tagger.tags.codec.os.replace", fail_replace)
        with pytest.raises(TagWriteError):
            save_tags(path, ["a"])
        assert path.read_bytes() == before
        assert sorted(p.name for p in path.parent.iterdir()) == ["pic.jpg"]


class TestDirectoryQueries:
    @pytest.fixture
    def tagged_dir(self, tmp_path, make_image):
        save_tags(make_image("b.jpg"), ["cat", "dog"])
        save_tags(make_image("a.png"), ["cat"])
        save_tags(make_image("c.webp"), ["Cat"])
        make_image("d.gif")
        make_image("e.jpg")
        (tmp_path / "sub").mkdir()
        save_tags(make_image("sub/f.jpg"), ["cat"])
        return tmp_path.resolve()

    def test_find_images_with_tag_sorted_and_exact(self, tagged_dir):
        found = find_images_with_tag(tagged_dir, "cat")
        assert [p.name for p in found] == ["a.png", "b.jpg"]

    def test_find_is_case_sensitive(self, tagged_dir):
        found = find_images_with_tag(tagged_dir, "Cat")
        assert [p.name for p in found] == ["c.webp"]

    def test_find_no_match(self, tagged_dir):
        assert find_images_with_tag(tagged_dir, "bird") == []

    def test_find_missing_directory(self, tmp_path):
        assert find_images_with_tag(tmp_path / "nope", "cat") == []

    def test_collect_all_tags(self, tagged_dir):
        assert collect_all_tags(tagged_dir) == {"cat", "dog", "Cat"}
