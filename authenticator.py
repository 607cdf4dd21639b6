"""
Password protection for serialized containers.

A key is stretched from the password with scrypt and the container is sealed
with AES-256-GCM. The sealed blob is laid out as::

    [16-byte salt][12-byte nonce][ciphertext][16-byte tag]

The salt and nonce are fresh for every call. The GCM tag is the only check on
the password: nothing derived from it is stored.
"""
import logging
from typing import Optional, Tuple

from Crypto.Cipher import AES
from Crypto.Protocol.KDF import scrypt
from Crypto.Random import get_random_bytes

from errors import AuthenticationError, MalformedCiphertextError

log = logging.getLogger(__name__)

SALT_SIZE = 16
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32

# scrypt work factors; changing them makes existing files unreadable
SCRYPT_N = 2 ** 15   # cost
SCRYPT_R = 8         # block size, memory = 128 * N * r = 32 MiB
SCRYPT_P = 1         # parallelism

MIN_BLOB_SIZE = SALT_SIZE + NONCE_SIZE + TAG_SIZE


def derive_key(password: str, salt: Optional[bytes] = None) -> Tuple[bytes, bytes]:
    if salt is None:
        salt = get_random_bytes(SALT_SIZE)
    key = scrypt(password.encode("utf-8"), salt, KEY_SIZE, N=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)
    return key, salt


def encrypt(plaintext: bytes, password: str) -> bytes:
    key, salt = derive_key(password)
    nonce = get_random_bytes(NONCE_SIZE)
    cipher = AES.new(key, AES.MODE_GCM, nonce=nonce, mac_len=TAG_SIZE)
    ciphertext, tag = cipher.encrypt_and_digest(plaintext)
    log.debug("sealed %d bytes", len(plaintext))
    return salt + nonce + ciphertext + tag


def decrypt(blob: bytes, password: str) -> bytes:
    if len(blob) < MIN_BLOB_SIZE:
        raise MalformedCiphertextError(
            f"sealed data is {len(blob)} bytes, need at least {MIN_BLOB_SIZE}"
        )

    salt = blob[:SALT_SIZE]
    nonce = blob[SALT_SIZE:SALT_SIZE + NONCE_SIZE]
    ciphertext = blob[SALT_SIZE + NONCE_SIZE:-TAG_SIZE]
    tag = blob[-TAG_SIZE:]

    key, _ = derive_key(password, salt)
    cipher = AES.new(key, AES.MODE_GCM, nonce=nonce, mac_len=TAG_SIZE)
    try:
        plaintext = cipher.decrypt_and_verify(ciphertext, tag)
    except ValueError:
        raise AuthenticationError("authentication tag mismatch") from None
    log.debug("opened %d bytes", len(plaintext))
    return plaintext
