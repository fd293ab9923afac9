"""
Conversion of asset fields and files between storage and API form

Every field write and read goes through the field encryption engine: secret
values are stored only as their encrypted envelope and are decrypted on the
way out.
"""

from typing import Any, Dict, Iterable, List

from assetvault.core.encryption import EncryptedPayload, FieldEncryption
from assetvault.models.asset import AssetFieldType
from assetvault.models.collections import Collection, build_collection
from assetvault.schemas.asset import AssetFieldInput, AssetFieldResponse, AssetFileResponse


def field_for_storage(encryption: FieldEncryption, field: AssetFieldInput) -> Dict[str, Any]:
    """
    Stored form of one field

    Exactly one of ``value`` or the ``encrypted_value``/``iv``/``tag`` triple
    is present.
    """
    field_type = (field.type or AssetFieldType.TEXT).value
    value = field.value or ""

    if field.is_secret:
        payload = encryption.encrypt(value)
        return {
            "key": field.key,
            "type": field_type,
            "is_secret": True,
            "encrypted_value": payload.cipher_text,
            "iv": payload.iv,
            "tag": payload.tag,
        }

    return {
        "key": field.key,
        "type": field_type,
        "is_secret": False,
        "value": value,
    }


def fields_for_storage(encryption: FieldEncryption, fields: Iterable[AssetFieldInput]) -> Collection:
    return build_collection(field_for_storage(encryption, field) for field in fields)


def field_for_response(encryption: FieldEncryption, item: Dict[str, Any]) -> AssetFieldResponse:
    """
    API form of one stored field

    Raises:
        CryptoError: if a secret envelope fails authentication
    """
    if item.get("is_secret"):
        value = encryption.decrypt(EncryptedPayload(
            cipher_text=item.get("encrypted_value") or "",
            iv=item.get("iv") or "",
            tag=item.get("tag") or "",
        ))
    else:
        value = item.get("value") or ""

    return AssetFieldResponse(
        id=item["id"],
        key=item["key"],
        type=item.get("type") or AssetFieldType.TEXT.value,
        is_secret=bool(item.get("is_secret")),
        value=value,
    )


def fields_for_response(encryption: FieldEncryption, items: Iterable[Dict[str, Any]]) -> List[AssetFieldResponse]:
    return [field_for_response(encryption, item) for item in items]


def file_for_response(item: Dict[str, Any]) -> AssetFileResponse:
    return AssetFileResponse(**item)
