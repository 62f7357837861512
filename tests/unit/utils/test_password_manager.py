import pytest
from cryptography.fernet import Fernet

from campus_portal.utils.password_crypto_utils import PasswordDecryptError, PasswordManager, get_password_manager


@pytest.fixture
def manager() -> PasswordManager:
    return PasswordManager(Fernet.generate_key().decode())


@pytest.mark.unit
def test_password_manager_round_trip(manager) -> None:
    encrypted = manager.encrypt_password("Secret#2024")

    assert encrypted != "Secret#2024"
    assert manager.decrypt_password(encrypted) == "Secret#2024"


@pytest.mark.unit
def test_password_manager_empty_password_encrypts_to_empty_string(manager) -> None:
    assert manager.encrypt_password("") == ""


@pytest.mark.unit
def test_password_manager_produces_distinct_ciphertexts(manager) -> None:
    assert manager.encrypt_password("Secret#2024") != manager.encrypt_password("Secret#2024")


@pytest.mark.unit
@pytest.mark.parametrize("ciphertext", ["", "not-base64!!", "Z2FyYmFnZQ=="])
def test_password_manager_rejects_invalid_ciphertext(manager, ciphertext) -> None:
    with pytest.raises(PasswordDecryptError):
        manager.decrypt_password(ciphertext)


@pytest.mark.unit
def test_password_manager_rejects_ciphertext_from_other_key(manager) -> None:
    other = PasswordManager(Fernet.generate_key().decode())

    with pytest.raises(PasswordDecryptError):
        manager.decrypt_password(other.encrypt_password("Secret#2024"))


@pytest.mark.unit
def test_get_password_manager_uses_app_key(app) -> None:
    with app.app_context():
        key = app.config["PASSWORD_ENCRYPTION_KEY"]
        encrypted = PasswordManager(key).encrypt_password("Secret#2024")

        assert get_password_manager().decrypt_password(encrypted) == "Secret#2024"
