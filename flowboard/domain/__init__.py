"""Domain layer for FlowBoard.

Pure models and functions describing the task board. Nothing in this
package performs I/O.
"""
