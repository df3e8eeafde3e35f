import pytest


def _row(rank: str, site: str | None, category: str | None, traffic: str | None) -> str:
    cells = [f"<td class=\"rank\">{rank}</td>", "<td><img src=\"/favicon.png\"></td>"]
    cells.append(f'<td><a class="link" href="/websites/{site}">{site}</a></td>' if site else "<td></td>")
    cells.append(
        f'<td class="hidden md:table-cell"><a href="/websites/taiwan/{category.lower()}">{category}</a></td>'
        if category
        else "<td></td>"
    )
    cells.append(f"<td><div><span>{traffic}</span><span>+3%</span></div></td>" if traffic else "<td>-</td>")
    return "<tr class=\"border-b\">" + "".join(cells) + "</tr>"


def ahrefs_page(*rows: str) -> str:
    return (
        "<html><body><table><thead><tr><th>#</th><th>Website</th></tr></thead>"
        "<tbody>" + "\n".join(rows) + "</tbody></table></body></html>"
    )


@pytest.fixture
def make_row():
    return _row


@pytest.fixture
def make_page():
    return ahrefs_page
