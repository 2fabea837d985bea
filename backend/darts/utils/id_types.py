from typing import NewType

PlayerId = NewType("PlayerId", int)
TournamentId = NewType("TournamentId", int)
ParticipantId = NewType("ParticipantId", int)
MatchId = NewType("MatchId", int)
ScoreHistoryId = NewType("ScoreHistoryId", int)
