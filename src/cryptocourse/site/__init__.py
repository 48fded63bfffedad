"""Landing page: live price card, course countdown badge and lead capture form."""
