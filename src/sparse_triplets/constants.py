ROWS_KEY = "rows"
COLS_KEY = "cols"

OPEN_TO_CLOSE = {"(": ")", "{": "}"}
SEPARATOR = ","

BRACKET_STYLES = {
    "curly": ("{", "}"),
    "paren": ("(", ")"),
}

class TripletColumn:
    ROW = "row"
    COL = "col"
    VALUE = "value"

    ALL = [ROW, COL, VALUE]
