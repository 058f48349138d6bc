"""Upload ``.rep`` artifacts and deploy them to configured Bridge servers."""
