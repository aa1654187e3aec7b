"""Built-in dataset shown by the web front end and used in examples."""

TREE_DATA = {
    "name": "Eve",
    "value": 15,
    "type": "black",
    "level": "yellow",
    "children": [
        {"name": "Cain", "value": 10, "type": "grey", "level": "red"},
        {
            "name": "Seth",
            "value": 10,
            "type": "grey",
            "level": "red",
            "children": [
                {"name": "Enos", "value": 7.5, "type": "grey", "level": "purple"},
                {"name": "Noam", "value": 7.5, "type": "grey", "level": "purple"},
            ],
        },
        {"name": "Abel", "value": 10, "type": "grey", "level": "blue"},
        {
            "name": "Awan",
            "value": 10,
            "type": "grey",
            "level": "green",
            "children": [
                {"name": "Enoch", "value": 7.5, "type": "grey", "level": "orange"}
            ],
        },
        {"name": "Azura", "value": 10, "type": "grey", "level": "green"},
    ],
}
