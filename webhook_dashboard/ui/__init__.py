"""Text presentation of the event grid."""
