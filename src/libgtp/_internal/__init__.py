"""Internal APIs for libgtp.

Note
----
This is an internal API not covered by versioning policy.
"""
