import hashlib

import pytest
from cryptography.hazmat.primitives import hashes

from stretchvault import DigestAlgorithm, InvalidArgument, as_digest, available_algorithms
from Crypto.Hash import keccak

from stretchvault.digests import CryptographyDigest, HashlibDigest, KeccakDigest, digest_name, get_digest, normalize_name


def test_registry_lists_sha2_and_sha3():
    names = available_algorithms()
    assert names == sorted(names)
    assert {"sha256", "sha512", "sha3_256", "sha3_512"} <= set(names)
    assert "md5" not in names


@pytest.mark.parametrize(
    "name,expected",
    [
        ("SHA3-256", "sha3_256"),
        (" Sha3-256 ", "sha3_256"),
        ("SHA-256", "sha256"),
        ("sha-384", "sha384"),
        ("SHA-512/224", "sha512_224"),
        ("Keccak-256", "keccak_256"),
    ],
)
def test_normalize_name(name, expected):
    assert normalize_name(name) == expected


@pytest.mark.parametrize("name", [n for n in available_algorithms() if not n.startswith("keccak_")])
def test_adapters_match_hashlib(name):
    crypto = get_digest(name)
    lib = HashlibDigest(name)
    assert isinstance(crypto, DigestAlgorithm)
    assert isinstance(lib, DigestAlgorithm)
    assert crypto.digest_size == lib.digest_size == hashlib.new(name).digest_size

    crypto.absorb(b"abc", b"", b"def")
    lib.absorb(b"abcdef")
    assert crypto.finalize_and_reset() == lib.finalize_and_reset() == hashlib.new(name, b"abcdef").digest()


def test_finalize_resets_state():
    d = get_digest("sha256")
    d.absorb(b"first")
    d.finalize_and_reset()
    d.absorb(b"second")
    assert d.finalize_and_reset() == hashlib.sha256(b"second").digest()


def test_as_digest_returns_protocol_objects_unchanged():
    d = HashlibDigest("sha256")
    assert as_digest(d) is d


def test_as_digest_from_cryptography_algorithm():
    d = as_digest(hashes.SHA512_256())
    assert isinstance(d, CryptographyDigest)
    assert d.name == "sha512_256"


def test_as_digest_ignores_prior_hashlib_state():
    h = hashlib.sha256(b"already absorbed")
    d = as_digest(h)
    assert isinstance(d, HashlibDigest)
    d.absorb(b"x")
    assert d.finalize_and_reset() == hashlib.sha256(b"x").digest()


@pytest.mark.parametrize("value", [None, "", "whirlpool", hashlib.sha1(), hashes.SHA1(), b"sha256"])
def test_as_digest_rejects(value):
    with pytest.raises(InvalidArgument):
        as_digest(value)


def test_keccak_registered():
    assert {"keccak_224", "keccak_256", "keccak_384", "keccak_512"} <= set(available_algorithms())


def test_keccak_256_empty_input():
    d = get_digest("keccak_256")
    assert isinstance(d, KeccakDigest)
    assert d.digest_size == 32
    d.absorb(b"")
    assert d.finalize_and_reset().hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


@pytest.mark.parametrize("bits", [224, 256, 384, 512])
def test_keccak_adapter_matches_pycryptodome_and_resets(bits):
    d = get_digest(f"keccak_{bits}")
    d.absorb(b"ab", b"c")
    assert d.finalize_and_reset() == keccak.new(digest_bits=bits, data=b"abc").digest()
    d.absorb(b"xyz")
    assert d.finalize_and_reset() == keccak.new(digest_bits=bits, data=b"xyz").digest()


def test_keccak_differs_from_sha3():
    k = get_digest("keccak_256")
    s = get_digest("sha3_256")
    k.absorb(b"abc")
    s.absorb(b"abc")
    assert k.finalize_and_reset() != s.finalize_and_reset()


def test_two_method_object_is_a_digest():
    class Plain:
        def absorb(self, *chunks):
            pass

        def finalize_and_reset(self):
            return b""

    p = Plain()
    assert isinstance(p, DigestAlgorithm)
    assert as_digest(p) is p
    assert digest_name(p) == "Plain"
    assert digest_name(get_digest("SHA-256")) == "sha256"
