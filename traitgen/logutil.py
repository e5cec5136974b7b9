# traitgen/logutil.py


def safe_log(cb, msg):
    """Hand msg to an optional log callback; a broken callback never stops a run."""
    if cb:
        try:
            cb(msg)
        except Exception:
            pass
