"""Terminal tab launchers: autodetection, WezTerm, Windows Terminal and a recording mock."""