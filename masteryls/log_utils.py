from __future__ import annotations
import datetime
import os
import sys

DEBUG_ENV = 'MASTERYLS_DEBUG'

def bool_true(v) -> bool:
    return str(v).strip().lower() in ('1','true','yes','y')

# Simple logger; stderr so reports written to stdout stay parseable
def log(level: str, msg: str) -> None:
    if level == 'debug' and not bool_true(os.environ.get(DEBUG_ENV, '')):
        return
    print(f"[{datetime.datetime.now().isoformat(timespec='seconds')}] [{level}] {msg}", file=sys.stderr)
