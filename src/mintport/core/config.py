# mintport/src/mintport/core/config.py

from pydantic_settings import BaseSettings
from pydantic import Field

from typing import Optional
import keyring


class Settings(BaseSettings):
    # Repository root holding docs.json, versions.json and the product folders
    docs_root: str = Field(default=".")

    # GitHub access
    github_token: Optional[str] = Field(default=None)
    github_org: str = Field(default="cosmos")
    request_timeout: int = Field(default=30)
    user_agent: str = Field(default="cosmos-docs-sync")

    # Link checker
    link_check_timeout: int = Field(default=5)
    base_url: str = Field(default="")

    # Security docs sync
    security_repo: str = Field(default="cosmos/security")
    security_branch: str = Field(default="main")

    # Migration staging output
    staging_dir: str = Field(default="./tmp/migration-staging")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore"
    }

    def get_secure_value(self, key: str, default=None):
        attr_name = key.lower()
        try:
            secure = keyring.get_password("mintport", key)
            return secure or getattr(self, attr_name, default)
        except Exception:
            return getattr(self, attr_name, default)

    def github_auth_token(self) -> Optional[str]:
        return self.get_secure_value("GITHUB_TOKEN")


# Instantiate settings
settings = Settings()
