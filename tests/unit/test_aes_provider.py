import logging

import pytest

from savebox_lib.crypto import (
    AesEncryptionProvider,
    EncryptionProviderFactory,
    derive_fixed_salt,
    derive_key_and_iv,
)
from savebox_lib.settings import EncryptionKind

PLAIN = '{"keys":["k"],"values":["\\"v\\""],"types":["str"]}'


def test_password_roundtrip_and_blob_format():
    p = AesEncryptionProvider()
    blob = p.encrypt(PLAIN, "abc")
    assert blob != PLAIN
    assert blob.count(":") == 1
    assert p.decrypt(blob, "abc") == PLAIN


def test_each_encryption_uses_a_fresh_salt():
    p = AesEncryptionProvider()
    assert p.encrypt(PLAIN, "abc") != p.encrypt(PLAIN, "abc")


def test_password_blob_readable_by_other_instance():
    blob = AesEncryptionProvider().encrypt(PLAIN, "abc")
    assert AesEncryptionProvider().decrypt(blob, "abc") == PLAIN


def test_wrong_password_does_not_reveal_plaintext():
    p = AesEncryptionProvider()
    blob = p.encrypt(PLAIN, "abc")
    assert p.decrypt(blob, "xyz") != PLAIN


def test_legacy_fixed_salt_blob_decrypts():
    p = AesEncryptionProvider()
    blob = p.encrypt_legacy(PLAIN, "abc")
    assert ":" not in blob
    assert p.decrypt(blob, "abc") == PLAIN


def test_fixed_salt_pads_with_byte_index():
    assert derive_fixed_salt("ab") == bytes([97, 98] + list(range(2, 16)))
    assert derive_fixed_salt("a" * 20) == b"a" * 16


def test_key_derivation_is_deterministic():
    key, iv = derive_key_and_iv("abc", b"\x01" * 16)
    assert (len(key), len(iv)) == (32, 16)
    assert derive_key_and_iv("abc", b"\x01" * 16) == (key, iv)
    assert derive_key_and_iv("abd", b"\x01" * 16) != (key, iv)


def test_default_key_only_readable_by_same_instance(caplog):
    p = AesEncryptionProvider()
    with caplog.at_level(logging.WARNING):
        blob = p.encrypt(PLAIN)
    assert "not persisted" in caplog.text
    assert p.decrypt(blob) == PLAIN
    assert AesEncryptionProvider().decrypt(blob) != PLAIN


def test_explicit_default_key_is_shared():
    key, iv = b"k" * 32, b"i" * 16
    blob = AesEncryptionProvider(key, iv).encrypt(PLAIN)
    assert AesEncryptionProvider(key, iv).decrypt(blob) == PLAIN


def test_invalid_key_sizes_rejected():
    with pytest.raises(ValueError):
        AesEncryptionProvider(key=b"short")
    with pytest.raises(ValueError):
        AesEncryptionProvider(key=b"k" * 32, iv=b"short")


def test_fail_open_on_garbage_and_empty_input(caplog):
    p = AesEncryptionProvider()
    with caplog.at_level(logging.ERROR):
        assert p.decrypt("not base64 at all!", "abc") == "not base64 at all!"
    assert "decryption failed" in caplog.text
    assert p.encrypt("", "abc") == ""
    assert p.decrypt("", "abc") == ""


def test_plaintext_envelope_passes_through_decrypt():
    assert AesEncryptionProvider().decrypt(PLAIN, "abc") == PLAIN


def test_factory_reuses_provider_and_rejects_none():
    f = EncryptionProviderFactory()
    assert f.get(EncryptionKind.AES) is f.get(EncryptionKind.AES)
    with pytest.raises(ValueError):
        f.get(EncryptionKind.NONE)


def test_factory_register_overrides_builder():
    f = EncryptionProviderFactory()
    custom = AesEncryptionProvider(b"k" * 32, b"i" * 16)
    f.register(custom)
    assert f.get(EncryptionKind.AES) is custom
