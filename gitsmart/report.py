"""
HTML review page — a self-contained rendering of the staged changes and the
proposed commit message.
"""

import html
import os
from datetime import datetime

from .cli_display import make_output_dir
from .diff.structurer import ChangeType, EntryKind, FileDiff

_CHANGE_LABELS = {
    ChangeType.MODIFIED: "Modified:",
    ChangeType.ADDED: "Added:",
    ChangeType.DELETED: "Deleted:",
}

_ENTRY_CLASSES = {
    EntryKind.ADDED: "line-added",
    EntryKind.REMOVED: "line-removed",
    EntryKind.CONTEXT: "",
}


def _escape(text: str) -> str:
    return html.escape(text, quote=True)


def change_type_label(change_type: ChangeType) -> str:
    return _CHANGE_LABELS.get(change_type, "Changed:")


def format_diff_stats(file_diff: FileDiff) -> str:
    """``"+3 −1"`` style summary; empty parts are left out."""
    stats = []
    if file_diff.additions:
        stats.append(f"+{file_diff.additions}")
    if file_diff.deletions:
        stats.append(f"−{file_diff.deletions}")
    return " ".join(stats)


def _file_to_html(index: int, file_diff: FileDiff) -> str:
    if file_diff.is_binary:
        body = '<div class="hunk-header">Binary file not shown</div>'
    else:
        parts: list[str] = []
        for hunk in file_diff.hunks:
            parts.append(f'<div class="hunk-header">{_escape(hunk.header_text)}</div>')
            for entry in hunk.entries:
                parts.append(
                    f'<div class="diff-line {_ENTRY_CLASSES[entry.kind]}">'
                    f'<span class="line-number">{entry.line_number}</span>'
                    f'<span class="line-content">{entry.prefix}{_escape(entry.content)}</span>'
                    f'</div>'
                )
        body = "\n".join(parts)

    return f"""
    <div class="file-diff">
      <div class="file-header" onclick="toggleDiff({index})">
        <div class="file-path">
          <button class="collapse-button" id="collapse-button-{index}">&minus;</button>
          {change_type_label(file_diff.change_type)} {_escape(file_diff.file_path)}
        </div>
        <div class="diff-stats">{_escape(format_diff_stats(file_diff))}</div>
      </div>
      <div class="diff-content" id="diff-content-{index}">
{body}
      </div>
    </div>"""


def render_review_html(file_diffs: list[FileDiff], commit_message: str) -> str:
    """Render *file_diffs* and *commit_message* into one HTML page."""
    files_html = "".join(_file_to_html(i, fd) for i, fd in enumerate(file_diffs))
    additions = sum(fd.additions for fd in file_diffs)
    deletions = sum(fd.deletions for fd in file_diffs)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>GitSmart — Review</title>
<style>
  :root {{ --bg: #0f172a; --card: #1e293b; --text: #e2e8f0; --muted: #94a3b8;
           --accent: #3b82f6; --add: #22c55e; --del: #ef4444; }}
  * {{ margin: 0; padding: 0; box-sizing: border-box; }}
  body {{ font-family: 'Inter', 'Segoe UI', sans-serif; background: var(--bg);
          color: var(--text); line-height: 1.5; padding: 2rem; }}
  .container {{ max-width: 1000px; margin: 0 auto; }}
  h2 {{ font-size: 1.1rem; margin: 1rem 0 0.5rem; }}
  .timestamp {{ color: var(--muted); font-size: 0.875rem; }}
  textarea {{ width: 100%; height: 100px; padding: 8px; background: var(--card);
              color: var(--text); border: 1px solid #334155;
              font-family: 'Consolas', monospace; }}
  .summary {{ color: var(--muted); font-size: 0.875rem; }}
  .file-diff {{ margin: 10px 0; border: 1px solid #334155; border-radius: 6px;
                overflow: hidden; }}
  .file-header {{ padding: 8px 16px; background: var(--card); cursor: pointer;
                  display: flex; align-items: center; justify-content: space-between; }}
  .file-path {{ font-weight: 600; }}
  .diff-stats {{ color: var(--muted); }}
  .diff-content {{ font-family: 'Consolas', monospace; font-size: 0.8rem;
                   background: #0d1117; overflow-x: auto; tab-size: 4; }}
  .diff-line {{ display: flex; min-width: fit-content; }}
  .line-number {{ color: var(--muted); text-align: right; padding: 0 8px; min-width: 50px;
                  user-select: none; border-right: 1px solid #334155; }}
  .line-content {{ padding: 0 8px; white-space: pre; }}
  .line-added {{ background: rgba(34, 197, 94, 0.15); color: var(--add); }}
  .line-removed {{ background: rgba(239, 68, 68, 0.15); color: var(--del); }}
  .hunk-header {{ color: #60a5fa; padding: 4px 8px; font-style: italic; }}
  .collapse-button {{ padding: 0 6px; background: transparent; color: var(--text);
                      border: 1px solid var(--accent); border-radius: 3px; cursor: pointer; }}
</style>
</head>
<body>
<div class="container">
  <p class="timestamp">Generated {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}</p>

  <h2>Commit Message</h2>
  <textarea id="commitMessage">{_escape(commit_message)}</textarea>

  <h2>Changes to be Committed</h2>
  <p class="summary">{len(file_diffs)} file(s) changed, +{additions} &minus;{deletions}</p>
  <div class="changes">
{files_html}
  </div>
</div>
<script>
  function toggleDiff(fileId) {{
    const content = document.getElementById('diff-content-' + fileId);
    const button = document.getElementById('collapse-button-' + fileId);
    const hidden = content.style.display === 'none';
    content.style.display = hidden ? 'block' : 'none';
    button.innerHTML = hidden ? '&minus;' : '+';
  }}
</script>
</body>
</html>"""


def write_review_html(file_diffs: list[FileDiff], commit_message: str,
                      output_path: str | None = None,
                      output_dir: str = ".gitsmart/reports") -> str:
    """Write the review page to disk.

    Returns the path to the generated file.
    """
    if output_path is None:
        make_output_dir(output_dir)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = os.path.join(output_dir, f"review_{timestamp}.html")
    else:
        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(render_review_html(file_diffs, commit_message))

    return output_path
