"""
Application layer package.

Services orchestrating the job lifecycle, applications, messaging and
notification dispatch, and the interfaces they depend on.
"""
