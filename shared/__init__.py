"""Cross-cutting helpers shared by the MIDI parser tools."""
