"""
Tests for request schemas and address validators.
"""

import pytest

from app.utils.exceptions import ValidationError
from app.validators import (
    MemeDropEntryCreate,
    ThemeUpdate,
    TokenCreate,
    parse_model,
    validate_address_for_chain,
    validate_email,
    validate_evm_address,
    validate_solana_address,
)


def token_data(**overrides):
    data = {
        "tokenName": "TestCoin",
        "tokenAddress": "So11111111111111111111111111111111111111112",
        "chain": "solana",
    }
    data.update(overrides)
    return data


class TestTokenCreate:
    """Token description validation."""

    def test_defaults_applied(self):
        token = parse_model(TokenCreate, token_data())

        assert token.token_name == "TestCoin"
        assert token.theme == "dark"
        assert token.button_style == "rounded"
        assert token.font_style == "sans"
        assert token.logo_url is None

    def test_snake_case_keys_accepted(self):
        token = TokenCreate(
            token_name="TestCoin",
            token_address="So11111111111111111111111111111111111111112",
            chain="solana",
        )
        assert token.token_name == "TestCoin"

    @pytest.mark.parametrize("name,valid", [("A", False), ("AB", True), ("", False)])
    def test_token_name_min_length(self, name, valid):
        if valid:
            assert parse_model(TokenCreate, token_data(tokenName=name)).token_name == name
        else:
            with pytest.raises(ValidationError) as exc_info:
                parse_model(TokenCreate, token_data(tokenName=name))
            fields = [err["field"] for err in exc_info.value.context["errors"]]
            assert "tokenName" in fields

    @pytest.mark.parametrize("address,valid", [("1234567", False), ("12345678", True)])
    def test_token_address_min_length(self, address, valid):
        if valid:
            assert parse_model(TokenCreate, token_data(tokenAddress=address)).token_address == address
        else:
            with pytest.raises(ValidationError):
                parse_model(TokenCreate, token_data(tokenAddress=address))

    def test_missing_chain_rejected(self):
        data = token_data()
        del data["chain"]

        with pytest.raises(ValidationError) as exc_info:
            parse_model(TokenCreate, data)

        assert exc_info.value.http_status == 400
        assert exc_info.value.message == "Invalid token data"

    def test_chain_lowercased(self):
        assert parse_model(TokenCreate, token_data(chain="Solana")).chain == "solana"

    @pytest.mark.parametrize("length,valid", [(32, True), (33, False)])
    def test_chain_max_length(self, length, valid):
        data = token_data(chain="c" * length)
        if valid:
            assert parse_model(TokenCreate, data).chain == "c" * length
        else:
            with pytest.raises(ValidationError) as exc_info:
                parse_model(TokenCreate, data)
            assert exc_info.value.context["errors"][0]["field"] == "chain"

    def test_unknown_theme_values_normalized(self):
        token = parse_model(
            TokenCreate,
            token_data(theme="Vaporwave", buttonStyle="square", fontStyle="serif"),
        )
        assert token.theme == "dark"
        assert token.button_style == "rounded"
        assert token.font_style == "sans"

    def test_known_theme_values_kept(self):
        token = parse_model(
            TokenCreate,
            token_data(theme="MATRIX", buttonStyle="glow", fontStyle="comic"),
        )
        assert token.theme == "matrix"
        assert token.button_style == "glow"
        assert token.font_style == "comic"

    @pytest.mark.parametrize(
        "logo_url",
        ["https://cdn.example.com/logo.png", "/uploads/abc.png"],
    )
    def test_logo_url_accepted(self, logo_url):
        assert parse_model(TokenCreate, token_data(logoUrl=logo_url)).logo_url == logo_url

    def test_relative_logo_url_rejected(self):
        with pytest.raises(ValidationError):
            parse_model(TokenCreate, token_data(logoUrl="logo.png"))

    def test_empty_logo_url_is_none(self):
        assert parse_model(TokenCreate, token_data(logoUrl="")).logo_url is None


class TestThemeUpdate:
    """Partial theme updates."""

    def test_only_provided_fields_changed(self):
        update = parse_model(ThemeUpdate, {"theme": "light"})
        assert update.changes() == {"theme": "light"}

    def test_camel_case_keys(self):
        update = parse_model(ThemeUpdate, {"buttonStyle": "pixel", "fontStyle": "futuristic"})
        assert update.changes() == {"button_style": "pixel", "font_style": "futuristic"}

    def test_unknown_value_normalized(self):
        update = parse_model(ThemeUpdate, {"theme": "neon"})
        assert update.changes() == {"theme": "dark"}

    def test_empty_update(self):
        assert parse_model(ThemeUpdate, {}).changes() == {}


class TestMemeDropEntryCreate:
    """Manual MemeDrop entry validation."""

    def test_optional_contacts(self):
        entry = parse_model(
            MemeDropEntryCreate,
            {"walletAddress": "wallet", "tokenName": "TestCoin", "chain": "solana", "email": ""},
        )
        assert entry.email is None
        assert entry.twitter is None

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_model(
                MemeDropEntryCreate,
                {"walletAddress": "w", "tokenName": "T", "chain": "solana", "email": "nope"},
            )
        assert exc_info.value.message == "Invalid entry data"

    def test_missing_wallet_rejected(self):
        with pytest.raises(ValidationError):
            parse_model(MemeDropEntryCreate, {"tokenName": "T", "chain": "solana"})

    def test_long_chain_rejected(self):
        with pytest.raises(ValidationError):
            parse_model(
                MemeDropEntryCreate,
                {"walletAddress": "w", "tokenName": "T", "chain": "c" * 33},
            )


class TestAddressValidators:
    """Chain address formats."""

    def test_solana_address(self, sample_solana_address):
        assert validate_solana_address(sample_solana_address) == (True, None)

    @pytest.mark.parametrize("address", ["", "0x1234", "O0Il" * 10, "1" * 10])
    def test_invalid_solana_address(self, address):
        is_valid, error = validate_solana_address(address)
        assert is_valid is False
        assert error

    def test_evm_address(self, sample_evm_address):
        assert validate_evm_address(sample_evm_address) == (True, None)

    def test_invalid_evm_address(self, sample_solana_address):
        assert validate_evm_address(sample_solana_address) == (False, "Invalid EVM address format")

    def test_address_for_chain(self, sample_solana_address, sample_evm_address):
        assert validate_address_for_chain(sample_solana_address, "solana")[0] is True
        assert validate_address_for_chain(sample_evm_address, "Base")[0] is True
        assert validate_address_for_chain(sample_evm_address, "solana")[0] is False
        assert validate_address_for_chain(sample_solana_address, "ethereum")[0] is False

    def test_unsupported_chain(self, sample_solana_address):
        assert validate_address_for_chain(sample_solana_address, "tron") == (
            False,
            "Unsupported chain: tron",
        )

    def test_email(self):
        assert validate_email("user@example.com") == (True, None)
        assert validate_email("") == (False, "Email is empty")
