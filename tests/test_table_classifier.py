from parsing.table_classifier import (
    TableShape,
    classify_document,
    extract_tables,
    resolve_headers,
)
from tests.factories import page, ranked_scorers_table, squad_table, standings_table, wikitable


def test_shapes_detected_in_document_order():
    html = page(
        standings_table([("Arsenal", 80), ("Chelsea", 60)]),
        ranked_scorers_table([("Erling Haaland", 20)]),
        squad_table([("Harry Kane", [(28, 22), (2, 3)])]),
    )
    shapes = [t.shape for t in classify_document(html)]
    assert shapes == [
        TableShape.STANDINGS,
        TableShape.RANKED_SCORER,
        TableShape.SQUAD_APPEARANCES,
    ]


def test_table_without_name_column_is_unrecognized():
    html = page(
        wikitable(
            [
                "<tr><th>Date</th><th>Opponent</th><th>Result</th></tr>",
                "<tr><td>1 Aug</td><td>Chelsea</td><td>2-1</td></tr>",
            ]
        )
    )
    (table,) = classify_document(html)
    assert table.shape is TableShape.UNRECOGNIZED


def test_player_table_without_rank_or_apps_goals_is_unrecognized():
    html = page(
        wikitable(
            [
                "<tr><th>Player</th><th>Club</th><th>Fee</th></tr>",
                "<tr><td>Someone</td><td>Elsewhere</td><td>10m</td></tr>",
            ]
        )
    )
    (table,) = classify_document(html)
    assert table.shape is TableShape.UNRECOGNIZED


def test_title_row_pushes_headers_to_second_row():
    html = page(
        wikitable(
            [
                '<tr><th colspan="3">Top goalscorers</th></tr>',
                "<tr><th>Rk.</th><th>Player</th><th>Gls</th></tr>",
                "<tr><td>1</td><td>Harry Kane</td><td>12</td></tr>",
            ]
        )
    )
    (raw,) = extract_tables(html)
    headers, header_row_index = resolve_headers(raw)
    assert headers == ["Rk.", "Player", "Gls"]
    assert header_row_index == 1
    (table,) = classify_document(html)
    assert table.shape is TableShape.RANKED_SCORER
    assert table.first_data_row == 2


def test_header_footnotes_and_reference_markup_are_removed():
    html = page(
        wikitable(
            [
                '<tr><th>Rank</th><th>Player<sup class="reference">[a]</sup></th>'
                "<th>Goals[1]</th></tr>",
                "<tr><td>1</td><td>Harry Kane</td><td>12</td></tr>",
            ]
        )
    )
    (table,) = classify_document(html)
    assert table.headers == ("Rank", "Player", "Goals")
    assert table.shape is TableShape.RANKED_SCORER


def test_falls_back_to_plain_tables_without_wikitable_class():
    html = (
        "<table><tr><th>Pos</th><th>Club</th><th>Pts</th></tr>"
        "<tr><td>1</td><td>Celtic</td><td>90</td></tr></table>"
    )
    (table,) = classify_document(html)
    assert table.shape is TableShape.STANDINGS


def test_squad_tables_skip_the_sub_header_row():
    html = page(squad_table([("Harry Kane", [(28, 22), (2, 3)])]))
    (table,) = classify_document(html)
    assert table.header_row_index == 0
    assert table.first_data_row == 2
    assert table.data_rows[0][3].text == "Harry Kane"
