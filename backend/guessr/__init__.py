"""WorldGuessr map detail page backend."""
