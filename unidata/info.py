#! /usr/bin/env python
"""The module creates some basic constants to describe the unidata package."""

title_name = u"unidata"
name = "unidata"
copyright = u"\xA92016-2026, the unidata authors"

major_version = "0.3"
build_date = "20261019"
version = "%s.%s" % (major_version, build_date)

title = (
    "unidata: "
    "Unicode Character Database lookup and search")

home = "https://www.unicode.org/ucd/"

UCDDatabaseURL = "https://www.unicode.org/Public/UNIDATA/UnicodeData.txt"
UCDBlockDatabaseURL = "https://www.unicode.org/Public/UNIDATA/Blocks.txt"
