import pytest

# (algorithm, stretch_count, base64) reference vectors for password="password", salt="salt"
SHA256_B64 = "4hvvzqZio+l9vGifQ7xF2+FKiyWRcb4lV3OSo9PsfUw="
SHA256_HEX = "e21befcea662a3e97dbc689f43bc45dbe14a8b259171be25577392a3d3ec7d4c"
# keccak_256 is the pre-FIPS 202 padding; FIPS sha3_256 gives a different value
KECCAK_256_B64 = "j8UDYCAmRhgDlGY6Ed0c4n4TyuYR/2kE/XzCiSSRPys="
SHA3_256_B64 = "/FrY+UoU5xNhuouz6xMxnJIkzv03tr9LEpxpvI3vwz4="


@pytest.fixture
def params():
    return {
        "password": "password",
        "salt": "salt",
        "algorithm": "sha256",
        "stretch_count": 5000,
    }
