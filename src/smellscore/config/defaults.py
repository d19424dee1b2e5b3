"""Default configuration values and starter .smellscore.toml template."""

DEFAULT_TOML = """\
# smellscore configuration
version = "1.0"

[analysis]
# exclude = ["tests/*", "migrations/*"]
extensions = [".py"]
max_file_size_kb = 1024
workers = 0                 # 0 = auto

[output]
format = "terminal"         # terminal | json | sarif
show_summary = true
top_files = 5
issues_per_file = 5
min_severity = "mild"       # mild | spicy | nuclear

[rules]
# enable = ["code-duplication", "deep-nesting"]   # empty = all enabled
# disable = ["magic-number"]

[duplication]
min_line_length = 10
min_occurrences = 3
neutralized_keywords = ["async", "await", "global", "nonlocal"]
min_block_size = 50
block_signature_length = 100

[ignore]
# files = ["setup.py"]
# rules = ["todo-comment"]

[scoring]
# fail_above = 40.0         # exit 1 when the total score is worse than this
# [scoring.rule_categories]
# print-debugging = "language-basics"
"""
