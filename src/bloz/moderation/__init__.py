"""
Link moderation core for Bloz.

- **link_detection.py**: Pure helpers for URL detection, hostname extraction
  and domain normalization.
- **warning_templates.py**: Banter pools used for warnings and the random pick.
- **moderation_engine.py**: Allow/delete decisions for live messages, with the
  standard and single-link policies, plus the cleanup rule.
- **warning_presenter.py**: Sends the warning reply, retracts it later and
  removes the offending message.
- **cleanup.py**: Batch sweep over recent channel history.
"""
