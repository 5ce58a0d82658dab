"""Core editing engine: path resolution, itemization, selection, navigation.

Nothing in this package imports a UI toolkit or touches the filesystem
(except :mod:`jextile.core.document_io`, the file collaborator).
"""
