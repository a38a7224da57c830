"""
WordleTurtle: a Slackbot that keeps score of the daily Wordle

Features
- Auto-detect Wordle share messages ("Wordle 1,283 3/6*") and record them per puzzle
- Replies with the current standings, who is still missing, and a little encouragement
- One hour before the daily deadline (17:00 reference time) posts a reminder,
  then at the deadline posts the final results for the day
- Weekly leaderboard (last 7 Wordles) posted automatically on the rollup weekday
- `WordleTurtle help` / `WordleTurtle leaderboard` commands
- SQLite persistence (file path configurable via env)

Quick Start
1) Create a Slack app → Enable Socket Mode OR Events API, add bot token scopes:
   channels:history, channels:read, chat:write, groups:history, groups:read, users:read
2) Install to workspace and note SLACK_BOT_TOKEN & SLACK_SIGNING_SECRET (and APP_LEVEL_TOKEN if using Socket Mode)
3) Export env vars (or put them in .env) and run:  python app.py

Env Vars
- SLACK_BOT_TOKEN (xoxb-...)
- SLACK_SIGNING_SECRET
- APP_LEVEL_TOKEN (xapp-...)  # if using Socket Mode
- USE_SOCKET_MODE=true|false (default true)
- PORT (optional, default 3000; HTTP mode only)
- DB_PATH (optional, default './wordles.db')
- BOT_NAME (optional, default 'WordleTurtle')
- TIMEZONE (optional, default 'America/Los_Angeles')
- DEADLINE_HOUR (optional, default 17)
- LEADERBOARD_WEEKDAY (optional, 0=Monday .. 6=Sunday, default 6)
- LOOKBACK_DAYS (optional, default 7)
- LOG_LEVEL (optional, default INFO)

"""

if __name__ == "__main__":
    from wordleturtle import main
    main()
