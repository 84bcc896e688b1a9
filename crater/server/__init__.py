"""Server pieces: tokens, API types, GitHub client, bot messages, try builds, agents and command parsing."""