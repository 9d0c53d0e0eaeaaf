import pytest

# root KSK-2017, key tag 20326
ROOT_KSK = (
    "AwEAAaz/tAm8yTn4Mfeh5eyI96WSVexTBAvkMgJzkKTOiW1vkIbzxeF3+/4RgWOq7HrxRixHlFlExOLAJr5"
    "emLvN7SWXgnLh4+B5xQlNVz8Og8kvArMtNROxVQuCaSnIDdD5LKyWbRd2n9WGe2R8PzgCmr3EgVLrjyBx"
    "WezF0jLHwVN8efS3rCj/EWgvIWgb9tarpVUDK/b58Da+sqqls3eNbuv7pr+eoZG+SrDK6nWeL3c6H5Apx"
    "z7LjVc1uTIdsIXxuOLYA4/ilBmSVIzuDWfdRUfhHdY6+cn8HFRm+2hM8AnXGXws9555KrUB5qihylGa8s"
    "ubX2Nn6UwNR1AkUTV74bU="
)

ROOT_ZSK = (
    "AwEAAentCcIEndLh2QSK+pHFq/PkKCwioxt75d7qNOUuTPMo0Fcte/NbwDPbocvbZ/eNb5RV/xQdapaJASQ"
    "/oDLsqzD0H1+JkHNuuKc2JLtpMxg4glSE4CnRXT2CnFTW5IwOREL+zeqZHy68OXy5ngW5KALbevRYRg/q2"
    "qFezRtCSQ0knmyPwgFsghVYLKwi116oxwEU5yZ6W7npWMxt5Z+Qs8diPNWrS5aXLgJtrWUGIIuFfuZwXYzi"
    "GRP/z3o1EfMo9zZU19KLopkoLXX7Ls/diCXdSEdJXTtFA8w0/OKQviuJebfKscoElCTswukVZ1VX5gbaFEo"
    "2xWhHJ9Uo63wYaTk="
)

# com. KSK, ECDSA P-256, key tag 19718
COM_KSK = (
    "tx8EZRAd2+K/DJRV0S+hbBzaRPS/G6JVNBitHzqpsGlz8huE61Ms9ANe6NSDLKJtiTBqfTJWDAywEp1FCsEINQ=="
)


@pytest.fixture
def root_ksk():
    return ROOT_KSK


@pytest.fixture
def root_zsk():
    return ROOT_ZSK


@pytest.fixture
def com_ksk():
    return COM_KSK


@pytest.fixture
def zonefile(tmp_path):
    def write(text: str, name: str = "test.zone") -> str:
        path = tmp_path / name
        path.write_text(text)
        return str(path)

    return write
