"""
HTML rendering for the viewer pages.

Pages are plain string templates styled with the Tailwind CDN and a
dark-mode toggle. Every interpolated value goes through html.escape.
"""

from html import escape
from typing import Dict, List, Optional
from urllib.parse import quote, urlencode

from audioviewer.dataset.catalog import DatasetCatalog
from audioviewer.query.pagination import PageResult
from audioviewer.query.projector import format_duration


PAGE_WINDOW_RADIUS = 3

_LAYOUT = """<!DOCTYPE html>
<html lang="en" class="">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <script src="https://cdn.tailwindcss.com"></script>
    <script>
        tailwind.config = {{ darkMode: 'class' }}
    </script>
    <script>
        if (localStorage.theme === 'dark' || (!('theme' in localStorage) && window.matchMedia('(prefers-color-scheme: dark)').matches)) {{
            document.documentElement.classList.add('dark')
        }} else {{
            document.documentElement.classList.remove('dark')
        }}
        function toggleTheme() {{
            if (localStorage.theme === 'dark') {{
                localStorage.theme = 'light';
                document.documentElement.classList.remove('dark');
            }} else {{
                localStorage.theme = 'dark';
                document.documentElement.classList.add('dark');
            }}
        }}
    </script>
</head>
<body class="bg-gray-100 dark:bg-gray-900 p-8 text-gray-900 dark:text-gray-100">
    <div class="{width} mx-auto bg-white dark:bg-gray-800 shadow-md rounded-lg p-6 relative">
        <div class="flex justify-between items-center mb-4">
            {back_link}
            <button onclick="toggleTheme()" class="px-3 py-1 bg-gray-200 dark:bg-gray-700 rounded-md text-sm">
                Toggle Theme
            </button>
        </div>
        <h1 class="text-2xl font-bold mb-4">{heading}</h1>
        {body}
    </div>
</body>
</html>
"""

_BACK_LINK = '<a href="/" class="text-blue-600 dark:text-blue-400 hover:underline">Back to list</a>'

_LINK_CLASS = (
    "px-3 py-1 bg-white dark:bg-gray-700 border border-gray-300 dark:border-gray-600 "
    "text-blue-600 dark:text-blue-300 hover:bg-gray-100 dark:hover:bg-gray-600 rounded-md"
)
_CURRENT_CLASS = "px-3 py-1 bg-blue-500 text-white rounded-md"


def _layout(
    title: str,
    body: str,
    heading: Optional[str] = None,
    back_link: bool = True,
    width: str = "max-w-6xl",
) -> str:
    return _LAYOUT.format(
        title=escape(title),
        heading=escape(heading or title),
        body=body,
        back_link=_BACK_LINK if back_link else "<span></span>",
        width=width,
    )


def view_url(filename: str, page: int, page_size: int, filter_text: Optional[str] = None) -> str:
    """Build a /view URL with a 1-based page number."""
    params: Dict[str, object] = {"page": page, "page_size": page_size}
    if filter_text:
        params["q"] = filter_text
    return f"/view/{quote(filename)}?{urlencode(params)}"


def audio_url(filename: str, index: int) -> str:
    return f"/audio/{quote(filename)}/{index}"


def page_window(current: int, total: int, radius: int = PAGE_WINDOW_RADIUS) -> List[int]:
    """
    1-based page numbers to link around the current page.

    Example:
        >>> page_window(10, 40, radius=2)
        [1, 8, 9, 10, 11, 12, 40]
    """
    if total <= 0:
        return []
    pages = {1, total}
    pages.update(range(max(1, current - radius), min(total, current + radius) + 1))
    return sorted(pages)


def render_index(catalog: DatasetCatalog) -> str:
    """Render the list of loaded Parquet files."""
    if len(catalog) == 0:
        items = '<li class="text-gray-500">No files loaded.</li>'
    else:
        items = "\n".join(
            f'<li><a href="/view/{quote(dataset.name)}" class="text-blue-600 dark:text-blue-400 hover:underline">'
            f"{escape(dataset.name)}</a> "
            f'<span class="text-sm text-gray-500">({len(dataset)} rows, '
            f"{escape(format_duration(dataset.total_duration))})</span></li>"
            for dataset in catalog
        )
    body = f'<ul class="list-disc pl-5 space-y-2">\n{items}\n</ul>'
    return _layout("Parquet Files", body, back_link=False, width="max-w-4xl")


def _render_filter_form(filename: str, page_size: int, filter_text: Optional[str]) -> str:
    value = escape(filter_text or "", quote=True)
    return f"""
        <form method="get" action="/view/{quote(filename)}" class="mb-4 flex gap-2">
            <input type="text" name="q" value="{value}" placeholder="Filter transcripts"
                   class="flex-1 px-3 py-1 border border-gray-300 dark:border-gray-600 dark:bg-gray-700 rounded-md">
            <input type="hidden" name="page_size" value="{page_size}">
            <button type="submit" class="px-3 py-1 bg-blue-500 text-white rounded-md">Filter</button>
        </form>"""


def _render_rows(filename: str, result: PageResult) -> str:
    if not result.items:
        return (
            '<tr><td colspan="3" class="px-4 py-6 text-center text-gray-500">'
            "No records on this page.</td></tr>"
        )

    rows = []
    for record in result.items:
        rows.append(f"""
            <tr class="border-b dark:border-gray-700">
                <td class="px-4 py-2"><audio controls preload="none" src="{audio_url(filename, record.index)}"></audio></td>
                <td class="px-4 py-2 font-mono">{escape(record.duration)}</td>
                <td class="px-4 py-2" title="{escape(record.full_transcript, quote=True)}">{escape(record.preview)}</td>
            </tr>""")
    return "".join(rows)


def _render_pagination(filename: str, result: PageResult) -> str:
    total_pages = result.total_pages
    if total_pages <= 1 and result.page_index == 0:
        return ""

    current = result.page_index + 1
    links = []

    if result.has_previous:
        previous = min(current - 1, max(total_pages, 1))
        links.append(
            f'<a href="{escape(view_url(filename, previous, result.page_size, result.filter))}" '
            f'class="{_LINK_CLASS}">Previous</a>'
        )

    last = 0
    for number in page_window(current, total_pages):
        if last and number > last + 1:
            links.append('<span class="px-2 py-1">…</span>')
        css = _CURRENT_CLASS if number == current else _LINK_CLASS
        links.append(
            f'<a href="{escape(view_url(filename, number, result.page_size, result.filter))}" '
            f'class="{css}">{number}</a>'
        )
        last = number

    if result.has_next:
        links.append(
            f'<a href="{escape(view_url(filename, current + 1, result.page_size, result.filter))}" '
            f'class="{_LINK_CLASS}">Next</a>'
        )

    return "\n".join(links)


def render_view(filename: str, result: PageResult) -> str:
    """Render one page of a file as a table with audio players."""
    if result.items:
        summary = (
            f"Showing {result.start_position}–{result.end_position} "
            f"of {result.total_matching} matching record(s)"
        )
    else:
        summary = f"{result.total_matching} matching record(s)"

    body = f"""
        {_render_filter_form(filename, result.page_size, result.filter)}
        <p class="text-sm text-gray-500 mb-2">{escape(summary)}</p>
        <table class="min-w-full bg-white dark:bg-gray-800 border-collapse">
            <thead>
                <tr class="border-b-2 dark:border-gray-700">
                    <th class="px-4 py-2 text-left">Audio</th>
                    <th class="px-4 py-2 text-left">Duration</th>
                    <th class="px-4 py-2 text-left">Transcription</th>
                </tr>
            </thead>
            <tbody>
                {_render_rows(filename, result)}
            </tbody>
        </table>
        <div class="mt-4 flex flex-wrap justify-center gap-2">
            {_render_pagination(filename, result)}
        </div>"""
    return _layout(f"{filename} - Parquet Viewer", body, heading=filename)


def render_error(title: str, message: str) -> str:
    body = f'<p class="text-red-600 dark:text-red-400">{escape(message)}</p>'
    return _layout(title, body, width="max-w-4xl")
