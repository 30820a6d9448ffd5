#!/usr/bin/env python3

"""Score analyzer output and post (or clear) the Python Doctor PR comment."""

from doctor.post_comment import main

if __name__ == "__main__":
    raise SystemExit(main())
