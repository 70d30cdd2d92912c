import pytest

from stunkit.sha1 import DIGEST_SIZE, sha1


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        (b"abc", "A9993E364706816ABA3E25717850C26C9CD0D89D"),
        (
            b"abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq",
            "84983E441C3BD26EBAAE4AA1F95129E5E54670F1",
        ),
    ],
)
def test_known_vectors(message, expected):
    assert sha1(message) == bytes.fromhex(expected)


def test_million_a():
    assert sha1(b"a" * 1_000_000) == bytes.fromhex(
        "34AA973CD4C4DAA4F61EEB2BDBAD27316534016F"
    )


def test_text_is_hashed_as_utf8():
    assert sha1("abc") == sha1(b"abc")


def test_bytearray_and_memoryview_accepted():
    assert sha1(bytearray(b"abc")) == sha1(memoryview(b"abc"))
    assert sha1(bytearray(b"abc")) == bytes.fromhex("A9993E364706816ABA3E25717850C26C9CD0D89D")


@pytest.mark.parametrize("size", [0, 1, 55, 56, 63, 64, 65, 200])
def test_digest_size_is_constant(size):
    assert len(sha1(bytes(size))) == DIGEST_SIZE


def test_different_inputs_give_different_digests():
    assert sha1(b"abc") != sha1(b"abd")
    assert sha1(b"abc") == sha1(b"abc")