"""Starter .gitdiffview.toml template."""

DEFAULT_TOML = """\
# gitdiffview configuration
version = "1.0"

[watch]
enable_on_start = true
interval_ms = 750             # HEAD marker poll interval
lock_retry_delay_ms = 100     # wait between checks while git holds a lock
lock_max_attempts = 50        # give up on this refresh after this many checks
auto_open = true              # open the view when HEAD changes
# force_polling = false

[view]
open_in_tab = true
close_mode = "destroy"        # destroy | detach
restore_files = true

[diff]
diff_cmd = ["git", "diff", "--no-color"]
status_cmd = ["git", "status", "--porcelain", "--untracked-files=all"]
full_file_context = 100000

[output]
log_level = "info"            # debug | info | warn | error
# theme = "ansi_dark"
"""
