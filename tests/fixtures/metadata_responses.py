# ABOUTME: Canned API responses for the openBD and Google Books providers.
# ABOUTME: Trimmed to the fields the parsers read.

OPENBD_RESPONSE = [
    {
        "onix": {
            "CollateralDetail": {
                "TextContent": [
                    {"TextType": "03", "Text": "「恥の多い生涯を送って来ました」"},
                ]
            }
        },
        "summary": {
            "isbn": "9784101006017",
            "title": "人間失格",
            "author": "太宰治",
            "publisher": "新潮社",
            "pubdate": "1952-10",
            "cover": "https://cover.openbd.jp/9784101006017.jpg",
        },
    }
]

OPENBD_RESPONSE_NO_DESCRIPTION = [
    {
        "onix": {"CollateralDetail": {}},
        "summary": {
            "isbn": "9784101006017",
            "title": "人間失格",
            "author": "太宰治",
            "publisher": "新潮社",
            "pubdate": "1952-10",
            "cover": "",
        },
    }
]

OPENBD_RESPONSE_MISS = [None]

GOOGLE_BOOKS_RESPONSE = {
    "totalItems": 1,
    "items": [
        {
            "volumeInfo": {
                "title": "No Longer Human",
                "authors": ["Osamu Dazai", "Donald Keene"],
                "publisher": "New Directions",
                "publishedDate": "1958",
                "description": "A classic of postwar Japanese literature.",
                "imageLinks": {"thumbnail": "http://books.google.com/thumb.jpg"},
            }
        }
    ],
}

GOOGLE_BOOKS_RESPONSE_EMPTY = {"totalItems": 0}
