#!/usr/bin/env python3
"""
Replay a YAML vault scenario against an in-process accrual ledger.

Scenario shape:

    config: {stake_unit: 32000000000000000000, admins: [admin]}
    start_time: 0
    funding: {admin: 10000000000000000000}
    steps:
      - {at: 0, op: register, caller: admin, vault_id: v1,
         stake: 32000000000000000000, bid_amount: 1000000000000000000, period: 8640000}
      - {at: 4320000, op: claim_rewards, caller: v1}
      - {at: 8640000, op: claim_final_rewards, caller: v1}

Prints one JSON line per step, then a final summary line.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.core.accrual import AccrualError
from src.integration.accrual_ledger import AccrualLedger
from src.integration.config import LedgerConfig, apply_env_overrides
from src.integration.structured_logging import configure_logging
from src.state.custody import CustodyTable


class ScriptedClock:
    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now


def run_scenario(doc: Mapping[str, Any]) -> List[Dict[str, Any]]:
    config = LedgerConfig.from_mapping(doc.get("config") or {})
    clock = ScriptedClock(int(doc.get("start_time", 0)))
    custody = CustodyTable()
    for holder, amount in (doc.get("funding") or {}).items():
        custody.credit(str(holder), int(amount))
    ledger = AccrualLedger(custody, config=config, clock=clock)

    out: List[Dict[str, Any]] = []
    for i, raw in enumerate(doc.get("steps") or []):
        at = int(raw["at"])
        if at < clock.now:
            raise ValueError(f"step {i}: time goes backwards ({at} < {clock.now})")
        clock.now = at
        op = raw["op"]
        row: Dict[str, Any] = {"step": i, "at": at, "op": op, "caller": raw.get("caller")}
        try:
            if op == "register":
                ledger.register(
                    raw["caller"], raw["vault_id"], int(raw["stake"]),
                    int(raw["bid_amount"]), int(raw["period"]),
                )
                row["amount"] = int(raw["bid_amount"])
            elif op == "claim_rewards":
                row["amount"] = ledger.claim_rewards(raw["caller"])
            elif op == "claim_final_rewards":
                row["amount"] = ledger.claim_final_rewards(raw["caller"])
            else:
                raise ValueError(f"step {i}: unknown op {op!r}")
            row["ok"] = True
        except AccrualError as exc:
            row["ok"] = False
            row["error"] = exc.code
        pool = ledger.global_state
        row["index"] = pool.index
        row["average_rate"] = pool.average_rate
        row["active_count"] = pool.active_count
        out.append(row)

    out.append({
        "summary": True,
        "custody_balance": custody.custody_balance,
        "balances": custody.get_all_balances(),
        "invariant_violations": ledger.check_invariants(),
    })
    return out


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("scenario", type=Path, help="YAML scenario file")
    ap.add_argument("--log-level", default=None, help="ledger log level (default: config log_level or ACCRUAL_LOG_LEVEL)")
    args = ap.parse_args(argv)

    doc = yaml.safe_load(args.scenario.read_text(encoding="utf-8")) or {}
    if not isinstance(doc, Mapping):
        print("[accrual-scenario] FAIL: scenario must be a YAML mapping", file=sys.stderr)
        return 2

    cfg = apply_env_overrides(LedgerConfig.from_mapping(doc.get("config") or {}))
    configure_logging(args.log_level or cfg.log_level)
    doc = dict(doc)
    doc["config"] = {
        "stake_unit": cfg.stake_unit,
        "early_termination_window": cfg.early_termination_window,
        "admins": list(cfg.admins),
        "log_level": cfg.log_level,
    }

    rows = run_scenario(doc)
    for row in rows:
        print(json.dumps(row, sort_keys=True))
    return 0 if not rows[-1]["invariant_violations"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
