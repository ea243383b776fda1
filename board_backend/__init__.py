"""Board agent backend - object store, completion client, tool executor and agent loop."""
