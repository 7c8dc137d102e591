import hashlib
import hmac
import logging
from dataclasses import dataclass

from fastapi import Request

from app.config import Settings
from app.exceptions import Unauthorized

logger = logging.getLogger("burnnote.security")

# 英文逗号与中文全角逗号都视为分隔符
KEY_DELIMITERS = (",", "，")


def _split_keys(raw_value: str | None) -> list[str]:
    value = raw_value or ""
    for delimiter in KEY_DELIMITERS[1:]:
        value = value.replace(delimiter, KEY_DELIMITERS[0])
    return [item.strip() for item in value.split(KEY_DELIMITERS[0]) if item.strip()]


@dataclass(frozen=True)
class KeyRegistry:
    keys: frozenset[str] = frozenset()

    @classmethod
    def from_raw(cls, admin_key: str | None = None, admin_keys: str | None = None) -> "KeyRegistry":
        entries = set(_split_keys(admin_keys))
        legacy = (admin_key or "").strip()
        if legacy:
            entries.add(legacy)
        return cls(frozenset(entries))

    @classmethod
    def from_settings(cls, config: Settings) -> "KeyRegistry":
        return cls.from_raw(config.ADMIN_KEY, config.ADMIN_KEYS)

    def __len__(self) -> int:
        return len(self.keys)

    def __repr__(self) -> str:
        return f"KeyRegistry(<{len(self.keys)} keys>)"

    def matches(self, candidate: str) -> bool:
        # 逐个比较全部 key，不提前返回，耗时与命中位置无关
        presented = candidate.encode("utf-8")
        matched = False
        for key in self.keys:
            matched |= hmac.compare_digest(key.encode("utf-8"), presented)
        return matched


@dataclass(frozen=True)
class AuthResult:
    authorized: bool
    owner: str | None = None
    reason: str | None = None


def derive_tenant_id(credential: str) -> str:
    return hashlib.sha256(credential.strip().encode("utf-8")).hexdigest()


def extract_credential(request: Request) -> str | None:
    value = request.headers.get("authorization")
    if value is None:
        return None
    raw = value.strip()
    if raw.lower().startswith("bearer "):
        raw = raw[7:].strip()
    return raw


def resolve_tenant(registry: KeyRegistry, credential: str | None, *, isolate: bool = True) -> AuthResult:
    if credential is None:
        return AuthResult(False, reason="missing_header")
    presented = credential.strip()
    if not presented:
        return AuthResult(False, reason="empty_credential")
    if not len(registry):
        return AuthResult(False, reason="no_keys_configured")
    if not registry.matches(presented):
        return AuthResult(False, reason="key_mismatch")
    return AuthResult(True, owner=derive_tenant_id(presented) if isolate else None)


def mask_tenant_id(owner: str | None) -> str:
    value = (owner or "").strip()
    if not value:
        return "-"
    if len(value) <= 8:
        return value
    return f"{value[:4]}...{value[-4:]}"


def _audit_auth_failure(request: Request, reason: str | None) -> None:
    client = getattr(request, "client", None)
    ip = getattr(client, "host", "-") if client else "-"
    logger.warning(
        "AUTH_DENY reason=%s method=%s path=%s ip=%s",
        reason,
        request.method,
        request.url.path,
        ip,
    )


def _debug_details(registry: KeyRegistry, credential: str | None) -> dict:
    # 仅在 AUTH_DEBUG 打开时返回，只有计数，不回显任何 key
    return {
        "header_present": credential is not None,
        "received_length": len(credential.strip()) if credential else 0,
        "configured_key_count": len(registry),
    }


@dataclass(frozen=True)
class Tenant:
    owner: str | None


async def require_tenant(request: Request) -> Tenant:
    state = request.app.state
    registry: KeyRegistry = state.key_registry
    config: Settings = state.config
    credential = extract_credential(request)
    result = resolve_tenant(registry, credential, isolate=config.TENANT_ISOLATION)
    if not result.authorized:
        _audit_auth_failure(request, result.reason)
        details = _debug_details(registry, credential) if config.AUTH_DEBUG else None
        raise Unauthorized(details=details)
    logger.debug("AUTH_OK path=%s tenant=%s", request.url.path, mask_tenant_id(result.owner))
    return Tenant(owner=result.owner)
