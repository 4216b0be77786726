from __future__ import annotations

import sys
import textwrap
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))


import pytest

from migration_check.config import CheckConfig


@pytest.fixture
def write_rust():
    def _write(path: Path, source: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def check_config() -> CheckConfig:
    return CheckConfig()


@pytest.fixture
def store_tree(tmp_path: Path, write_rust) -> Path:
    src = tmp_path / "src"
    write_rust(
        src / "store.rs",
        """
        use serde::{Deserialize, Serialize};

        #[derive(Serialize, Deserialize)]
        pub enum KeyValue {
            Account(Account),
            Ledger(Ledger),
        }
        """,
    )
    write_rust(
        src / "model" / "account.rs",
        """
        #[derive(Serialize, Deserialize)]
        pub struct Account {
            pub owner: String,
            pub balance: u32,
            #[serde(skip)]
            pub cache: Option<Vec<u8>>,
        }
        """,
    )
    write_rust(
        src / "model" / "ledger.rs",
        """
        pub struct Ledger {
            pub entries: Vec<Entry>,
        }

        pub struct Entry {
            pub account: Account,
            pub amount: u64,
        }

        pub struct Unreferenced {
            pub value: u8,
        }
        """,
    )
    return src
