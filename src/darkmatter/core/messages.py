"""User-facing text for Dark Matter, keyed by locale.

Every string printed by the CLI or carried by an error lives here so that a
translation is a new mapping rather than a copy of the command surface.
Templates use ``str.format`` placeholders.
"""

import logging

from darkmatter.core.config import LANGUAGE

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        # Errors
        "vault_not_found": (
            "Error: database {path} not found. "
            "Please run 'dm init <gpg_key_hash>' to create a new vault."
        ),
        "vault_already_exists": (
            "Error: database {path} already exists. "
            "Please remove it or use a different directory."
        ),
        "source_not_found": "Error: File '{path}' not found",
        "key_not_found": "Error: GPG key '{key_id}' not found",
        "key_not_found_hint": (
            "Try run: gpg --list-keys {key_id}\n"
            "Maybe you need to import the key: gpg --import path/to/key.asc"
        ),
        "key_unusable": "Error: GPG key '{key_id}' cannot be used for encryption",
        "key_unusable_hint": (
            "Please ensure the key is not expired and has encryption capabilities"
        ),
        "file_already_exists": (
            "Error: File '{path}' already exists in vault. "
            "Use 'dm file update {path}' to update it."
        ),
        "secret_already_exists": (
            "Error: Secret '{name}' already exists in vault. "
            "Use 'dm secret update {name}' to update it."
        ),
        "file_not_in_storage": "Error: File '{path}' not found in vault",
        "secret_not_in_storage": "Error: Secret '{name}' not found in vault",
        "encryption_unusable_key": (
            "Error: GPG key '{key_id}' cannot be used for encryption ({reason})"
        ),
        "encryption_unusable_key_hint": (
            "Possible reasons: key expired, key revoked, key has no encryption "
            "subkey, insufficient trust level.\n"
            "Try running: gpg --edit-key {key_id} trust"
        ),
        "encryption_engine": "GPG error: encryption failed ({reason})",
        "decryption_key_unavailable": (
            "Error: no private key available to decrypt this record"
        ),
        "decryption_key_unavailable_hint": (
            "Make sure you have the corresponding private key"
        ),
        "decryption_passphrase_invalid": "Error: invalid passphrase for private key",
        "decryption_passphrase_invalid_hint": (
            "Make sure gpg-agent is running and configured"
        ),
        "decryption_engine": "GPG error: decryption failed ({reason})",
        "gpg_unavailable": "GPG error: unable to start GnuPG ({reason})",
        "storage_engine": "Database error: {reason}",
        "io_error": "IO error: {path}: {reason}",
        "missing_bound_key": "vault configuration has no '{key}' entry",
        # Vault lifecycle
        "vault_initialized": "Vault initialized with GPG key: {key_id}",
        "key_usable": "GPG key found and can be used for encryption",
        # Files
        "file_added": "File '{path}' successfully added to vault",
        "file_updated": "File '{path}' successfully updated in vault",
        "file_removed": "File '{path}' successfully removed from vault",
        "file_remove_missing": "File '{path}' not found in vault",
        "files_empty": "Vault is empty",
        "files_header": "List of files in vault:",
        "file_exported": "File '{path}' exported",
        "export_overwrite_prompt": "File '{path}' already exists. Overwrite?",
        "export_canceled": "Export canceled",
        # Secrets
        "secret_added": "Secret '{name}' successfully added",
        "secret_updated": "Secret '{name}' successfully updated",
        "secret_removed": "Secret '{name}' successfully removed from vault",
        "secret_remove_missing": "Secret '{name}' not found in vault",
        "secrets_empty": "No secrets found in vault",
        "secrets_header": "List of secrets in vault:",
        "secret_list_item": "  {name} tags: {tags}",
        "secret_value_prompt": "Secret value",
        # Key diagnostics
        "key_found": "GPG key found in keyring",
        "capabilities_title": "Key capabilities",
        "column_capability": "Capability",
        "column_field": "Field",
        "column_value": "Value",
        "cap_encryption": "Encryption",
        "cap_signing": "Signing",
        "cap_certification": "Certification",
        "cap_authentication": "Authentication",
        "yes": "Yes",
        "no": "No",
        "unknown": "Unknown",
        "details_title": "Details",
        "detail_id": "ID",
        "detail_fingerprint": "Fingerprint",
        "subkeys_title": "Subkeys ({count})",
        "subkey_can_encrypt": "Can encrypt",
        "uids_title": "User IDs ({count})",
        "uid_name": "Name",
        "uid_email": "Email",
        "encryption_test_title": "Encryption testing",
        "encryption_test_ok": "Encryption successful",
        "encryption_test_failed": "Encryption failed: {reason}",
        "encryption_test_skipped": "Skipped (key does not support encryption)",
        "key_problem": "Problem: Key cannot be used for encryption",
        "key_problem_solution": (
            "Solution: Create a new key with encryption capability "
            "or add a subkey for encryption"
        ),
        "key_suitable": "Key is suitable for use with dark-matter",
    },
    "ru": {
        "vault_not_found": (
            "Ошибка: база данных {path} не найдена. "
            "Выполните 'dm init <gpg_key_hash>', чтобы создать хранилище."
        ),
        "vault_already_exists": (
            "Ошибка: база данных {path} уже существует. "
            "Удалите её или используйте другой каталог."
        ),
        "source_not_found": "Ошибка: файл '{path}' не найден",
        "key_not_found": "Ошибка: GPG ключ '{key_id}' не найден",
        "key_not_found_hint": (
            "Попробуйте: gpg --list-keys {key_id}\n"
            "Возможно, ключ нужно импортировать: gpg --import path/to/key.asc"
        ),
        "key_unusable": "Ошибка: GPG ключ '{key_id}' не может использоваться для шифрования",
        "key_unusable_hint": (
            "Убедитесь, что срок действия ключа не истёк и он поддерживает шифрование"
        ),
        "file_already_exists": (
            "Ошибка: файл '{path}' уже есть в хранилище. "
            "Используйте 'dm file update {path}' для обновления."
        ),
        "secret_already_exists": (
            "Ошибка: секрет '{name}' уже есть в хранилище. "
            "Используйте 'dm secret update {name}' для обновления."
        ),
        "file_not_in_storage": "Ошибка: файл '{path}' не найден в хранилище",
        "secret_not_in_storage": "Ошибка: секрет '{name}' не найден в хранилище",
        "encryption_unusable_key": (
            "Ошибка: GPG ключ '{key_id}' не может использоваться для шифрования ({reason})"
        ),
        "encryption_unusable_key_hint": (
            "Возможные причины: ключ просрочен, отозван, не имеет подключа "
            "для шифрования или ему недостаточно доверия.\n"
            "Попробуйте: gpg --edit-key {key_id} trust"
        ),
        "encryption_engine": "Ошибка GPG: не удалось зашифровать ({reason})",
        "decryption_key_unavailable": (
            "Ошибка: нет закрытого ключа для расшифровки записи"
        ),
        "decryption_key_unavailable_hint": (
            "Убедитесь, что у вас есть соответствующий закрытый ключ"
        ),
        "decryption_passphrase_invalid": "Ошибка: неверная парольная фраза закрытого ключа",
        "decryption_passphrase_invalid_hint": (
            "Убедитесь, что gpg-agent запущен и настроен"
        ),
        "decryption_engine": "Ошибка GPG: не удалось расшифровать ({reason})",
        "gpg_unavailable": "Ошибка GPG: не удалось запустить GnuPG ({reason})",
        "storage_engine": "Ошибка базы данных: {reason}",
        "io_error": "Ошибка ввода-вывода: {path}: {reason}",
        "missing_bound_key": "в конфигурации хранилища нет записи '{key}'",
        "vault_initialized": "Хранилище создано с GPG ключом: {key_id}",
        "key_usable": "GPG ключ найден и может использоваться для шифрования",
        "file_added": "Файл '{path}' добавлен в хранилище",
        "file_updated": "Файл '{path}' обновлён в хранилище",
        "file_removed": "Файл '{path}' удалён из хранилища",
        "file_remove_missing": "Файл '{path}' не найден в хранилище",
        "files_empty": "Хранилище пусто",
        "files_header": "Файлы в хранилище:",
        "file_exported": "Файл '{path}' экспортирован",
        "export_overwrite_prompt": "Файл '{path}' уже существует. Перезаписать?",
        "export_canceled": "Экспорт отменён",
        "secret_added": "Секрет '{name}' добавлен",
        "secret_updated": "Секрет '{name}' обновлён",
        "secret_removed": "Секрет '{name}' удалён из хранилища",
        "secret_remove_missing": "Секрет '{name}' не найден в хранилище",
        "secrets_empty": "В хранилище нет секретов",
        "secrets_header": "Секреты в хранилище:",
        "secret_list_item": "  {name} теги: {tags}",
        "secret_value_prompt": "Значение секрета",
        "key_found": "GPG ключ найден в связке ключей",
        "capabilities_title": "Возможности ключа",
        "column_capability": "Возможность",
        "column_field": "Поле",
        "column_value": "Значение",
        "cap_encryption": "Шифрование",
        "cap_signing": "Подпись",
        "cap_certification": "Сертификация",
        "cap_authentication": "Аутентификация",
        "yes": "Да",
        "no": "Нет",
        "unknown": "Неизвестно",
        "details_title": "Подробности",
        "detail_id": "ID",
        "detail_fingerprint": "Отпечаток",
        "subkeys_title": "Подключи ({count})",
        "subkey_can_encrypt": "Шифрование",
        "uids_title": "Идентификаторы пользователя ({count})",
        "uid_name": "Имя",
        "uid_email": "Email",
        "encryption_test_title": "Проверка шифрования",
        "encryption_test_ok": "Шифрование успешно",
        "encryption_test_failed": "Ошибка шифрования: {reason}",
        "encryption_test_skipped": "Пропущено (ключ не поддерживает шифрование)",
        "key_problem": "Проблема: ключ не может использоваться для шифрования",
        "key_problem_solution": (
            "Решение: создайте новый ключ с возможностью шифрования "
            "или добавьте подключ для шифрования"
        ),
        "key_suitable": "Ключ подходит для использования с dark-matter",
    },
}


def get_message(key: str, locale: str | None = None, **params) -> str:
    """
    Render a user-facing message.

    Args:
        key: Message key
        locale: Locale code (defaults to DM_LANG)
        **params: Values for the template placeholders

    Returns:
        Rendered message, falling back to the default locale
    """
    catalog = MESSAGES.get(locale or LANGUAGE) or MESSAGES[DEFAULT_LOCALE]
    template = catalog.get(key)
    if template is None:
        template = MESSAGES[DEFAULT_LOCALE].get(key)
    if template is None:
        logger.debug("Missing message key: %s", key)
        return key
    return template.format(**params)
