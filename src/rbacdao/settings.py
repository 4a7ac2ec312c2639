"""環境変数からの設定読み込み."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rbacdao.config import DEFAULT_TABLE_PREFIX, StoreConfig
from rbacdao.dialect import Dialect
from rbacdao.exceptions import ConfigurationError
from rbacdao.placeholder import PlaceholderFormat


class StoreSettings(BaseSettings):
    """``RBACDAO_`` 接頭辞の環境変数から読み込む設定.

    ``dialect`` を指定した場合、``placeholder`` と ``returning`` の
    未指定分は方言の既定値で補う。
    """

    model_config = SettingsConfigDict(env_prefix="RBACDAO_", env_file=".env", extra="ignore")

    dialect: str | None = Field(default=None, description="sqlite / postgresql / mysql")
    placeholder: str | None = Field(default=None, description="question / dollar / format / colon")
    returning: bool | None = Field(default=None, description="INSERT ... RETURNING を使うか")
    table_prefix: str = Field(default=DEFAULT_TABLE_PREFIX)

    @field_validator("placeholder")
    @classmethod
    def _check_placeholder(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                PlaceholderFormat.parse(value)
            except ConfigurationError as exc:
                raise ValueError(str(exc)) from exc
        return value

    @field_validator("dialect")
    @classmethod
    def _check_dialect(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                Dialect.parse(value)
            except ConfigurationError as exc:
                raise ValueError(str(exc)) from exc
        return value

    def to_config(self) -> StoreConfig:
        """StoreConfig に変換する."""
        if self.dialect is not None:
            base = StoreConfig.for_dialect(Dialect.parse(self.dialect))
        else:
            base = StoreConfig()
        placeholder = (
            PlaceholderFormat.parse(self.placeholder)
            if self.placeholder is not None
            else base.placeholder
        )
        returning = self.returning if self.returning is not None else base.returning
        return StoreConfig(
            placeholder=placeholder,
            returning=returning,
            table_prefix=self.table_prefix,
        )
