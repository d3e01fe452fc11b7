"""HTML pages served by the download server."""

WEB_HEAD = """<!DOCTYPE html>
<html>
<head>
    <meta http-equiv="Content-Type" content="text/html" charset="UTF-8"/>
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>naslink</title>
</head>
<body>
    <style>
    body {
        font-family: sans-serif;
        background-color: #212121;
        color: white;
        text-align: center;
        margin: 2rem;
    }
    span {
        color: red;
    }
    img {
        display: inline;
        width: 300px;
    }
    </style>

    <img src="/logo.png" alt=""/>
"""

INDEX = """
    <p>Welcome to naslink!</p>
"""

INVALID = """
    <p>You've Been NasLinked!!</p>
    <p><span><b>Requested file was changed or removed.</b></span></p>
"""

WEB_FOOT = """
</body>
</html>
"""

INDEX_PAGE = WEB_HEAD + INDEX + WEB_FOOT
INVALID_PAGE = WEB_HEAD + INVALID + WEB_FOOT
