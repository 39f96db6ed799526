"""Resolution engine: record index, temporal resolver, hierarchy merger, lookup facade."""
