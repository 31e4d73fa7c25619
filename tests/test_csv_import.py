from catalog_service.data.csv_import import (
    DEFAULT_CATEGORY,
    DEFAULT_DESCRIPTION,
    DEFAULT_NAME,
    decode_upload,
    parse_products_csv,
    split_row,
)
from catalog_service.data.records import PLACEHOLDER_PICTURE_URL, ProductRecord


def test_single_row_maps_positionally() -> None:
    result = parse_products_csv("name,desc,price,cat,url\nA,B,9.99,C,http://x", [])

    assert result.total == 1
    assert result.products[0].to_dict() == {
        "id": "1",
        "name": "A",
        "description": "B",
        "price": 9.99,
        "category": "C",
        "pictureUrl": "http://x",
        "status": "pending",
    }


def test_header_is_skipped_even_when_it_looks_like_data() -> None:
    text = "Lamp,Desk lamp,19.90,Home,http://lamp\nChair,Office chair,99,Home,http://chair"

    result = parse_products_csv(text, [])

    assert [record.name for record in result.products] == ["Chair"]


def test_short_rows_and_blank_lines_are_dropped() -> None:
    text = "\n".join(
        [
            "name,description,price,category,pictureUrl",
            "",
            "Only,four,1,columns",
            "   ",
            "Mug,Ceramic mug,12.5,Kitchen,http://mug",
            "Pen,Blue pen,2,Office,http://pen,extra",
        ]
    )

    result = parse_products_csv(text, [])

    assert [record.name for record in result.products] == ["Mug", "Pen"]
    assert result.products[1].picture_url == "http://pen"


def test_ids_follow_existing_catalog_in_output_order() -> None:
    existing = [ProductRecord(id="4"), ProductRecord(id="legacy")]
    text = "h1,h2,h3,h4,h5\nA,a,1,c,u\nshort\nB,b,2,c,u"

    result = parse_products_csv(text, existing)

    assert [record.id for record in result.products] == ["5", "6"]
    assert len(existing) == 2


def test_empty_fields_use_fallbacks_and_bad_price_is_zero() -> None:
    result = parse_products_csv('h,h,h,h,h\n"",,abc,,', [])

    record = result.products[0]
    assert record.name == DEFAULT_NAME
    assert record.description == DEFAULT_DESCRIPTION
    assert record.category == DEFAULT_CATEGORY
    assert record.picture_url == PLACEHOLDER_PICTURE_URL
    assert record.price == 0.0
    assert record.status == "pending"


def test_quotes_and_whitespace_are_stripped_once() -> None:
    assert split_row(' "Tea" , ""Green"" ,3,x,y\r') == ["Tea", '"Green"', "3", "x", "y"]


def test_windows_line_endings_and_bom() -> None:
    text = decode_upload("\ufeffname,d,p,c,u\r\nKettle,Steel,45.00,Kitchen,http://k\r\n".encode("utf-8"))

    result = parse_products_csv(text, [])

    assert result.total == 1
    assert result.products[0].picture_url == "http://k"
    assert result.products[0].price == 45.0


def test_price_reads_leading_number_only() -> None:
    text = "h,h,h,h,h\nA,B,12.50 BRL,C,u\nA,B,1_000,C,u\nA,B, 3e2x,C,u\nA,B,-4,C,u"

    result = parse_products_csv(text, [])

    assert [record.price for record in result.products] == [12.5, 1.0, 300.0, 0.0]
