"""
Speed and memory measurements for jtree.

Each benchmark runs the same generated document through jtree, the stdlib
json module, orjson and ujson so the numbers are directly comparable. The
streaming cases parse from a lazy source to show peak memory stays near the
configured buffer size.
"""
