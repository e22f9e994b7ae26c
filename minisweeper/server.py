"""Flask server for the Minesweeper mini app."""
import asyncio
import logging
import uuid
from datetime import datetime

from flask import Flask, jsonify, request
from flask_cors import CORS
from temporalio.client import Client
from temporalio.service import RPCError, RPCStatusCode

from minisweeper import config
from minisweeper.client_provider import get_temporal_client
from minisweeper.host import resolve_player
from minisweeper.leaderboard import LeaderboardStore
from minisweeper.manifest import build_manifest
from minisweeper.types import Difficulty, GameSnapshot, MoveRequest, NewGameRequest
from minisweeper.workflows import MinesweeperWorkflow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app, origins="*", methods=["GET", "POST", "OPTIONS"], allow_headers=["Content-Type"])

# Global client references
temporal_client: Client | None = None
leaderboard: LeaderboardStore | None = None


def get_leaderboard() -> LeaderboardStore:
    """Return the leaderboard store, creating its schema on first use."""
    global leaderboard
    if leaderboard is None:
        leaderboard = LeaderboardStore(config.DATABASE_URL)
        leaderboard.init()
    return leaderboard


def is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def json_body():
    """Return the request body if it is a JSON object, otherwise None."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def is_not_found(error: Exception) -> bool:
    return isinstance(error, RPCError) and error.status == RPCStatusCode.NOT_FOUND


def serialize_datetime(obj):
    """Helper to serialize datetime objects."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def serialize_snapshot(snapshot: GameSnapshot | None):
    """Convert a game snapshot to JSON-serializable format."""
    if snapshot is None:
        return None
    player = snapshot.player
    return {
        'id': snapshot.id,
        'difficulty': Difficulty(snapshot.difficulty).value,
        'status': str(getattr(snapshot.status, 'value', snapshot.status)).upper(),
        'board': {
            'cells': snapshot.cells,
            'rows': snapshot.rows,
            'cols': snapshot.cols,
            'mineCount': snapshot.mine_count,
        },
        'flagCount': snapshot.flag_count,
        'minesRemaining': snapshot.remaining_mines,
        'time': snapshot.elapsed,
        'player': {'userFid': player.user_fid, 'username': player.username} if player else None,
        'notice': snapshot.notice,
    }


async def query_with_retry(handle, max_retries=5):
    """Query with retry logic for workflow initialization."""
    for i in range(max_retries):
        try:
            game_state = await handle.query(MinesweeperWorkflow.get_game_state_query)
            if game_state is not None or i == max_retries - 1:
                return game_state
        except Exception as error:
            if i == max_retries - 1:
                raise error
        logger.info(f"Query not ready yet, retrying in {(i + 1) * 100}ms...")
        await asyncio.sleep((i + 1) * 0.1)


@app.route('/api/scores', methods=['POST'])
def save_score():
    """Record a winning time."""
    data = json_body()
    if data is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    user_fid = data.get('userFid')
    username = data.get('username')
    difficulty = data.get('difficulty')
    time_seconds = data.get('time')

    if not user_fid or not username or not difficulty or not time_seconds:
        return jsonify({'error': 'Missing required fields'}), 400
    if not is_int(user_fid):
        return jsonify({'error': 'Invalid user FID'}), 400
    if difficulty not in Difficulty.values():
        return jsonify({'error': 'Invalid difficulty'}), 400
    if not is_int(time_seconds) or time_seconds <= 0:
        return jsonify({'error': 'Invalid time'}), 400

    try:
        result = get_leaderboard().submit_score(user_fid, str(username), difficulty, time_seconds)
    except Exception as error:
        logger.error(f"Error saving score: {error}")
        return jsonify({'error': 'Failed to save score'}), 500

    return jsonify({
        'success': True,
        'isNewBest': result.is_new_best,
        'message': 'New best score!' if result.is_new_best else 'Score saved',
    })


@app.route('/api/scores', methods=['GET'])
def get_top_scores():
    """Fastest times for a difficulty."""
    difficulty = request.args.get('difficulty')
    if difficulty not in Difficulty.values():
        return jsonify({'error': 'Invalid or missing difficulty parameter'}), 400

    try:
        scores = get_leaderboard().top_scores(difficulty, config.LEADERBOARD_SIZE)
    except Exception as error:
        logger.error(f"Error fetching scores: {error}")
        return jsonify({'error': 'Failed to fetch scores'}), 500

    return jsonify([
        {
            'user_fid': score.user_fid,
            'username': score.username,
            'time': score.time,
            'created_at': serialize_datetime(score.created_at),
        }
        for score in scores
    ])


@app.route('/api/scores/user/<fid>', methods=['GET'])
def get_user_scores(fid):
    """Best time per difficulty for one player."""
    try:
        user_fid = int(fid)
    except ValueError:
        return jsonify({'error': 'Invalid user FID'}), 400

    try:
        scores = get_leaderboard().user_scores(user_fid)
    except Exception as error:
        logger.error(f"Error fetching user scores: {error}")
        return jsonify({'error': 'Failed to fetch user scores'}), 500

    return jsonify(scores)


@app.route('/api/games', methods=['POST'])
def create_game():
    """Create a new game."""
    data = json_body()
    if data is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    difficulty = data.get('difficulty', Difficulty.EASY.value)
    if difficulty not in Difficulty.values():
        return jsonify({'error': 'Invalid difficulty'}), 400

    player = resolve_player({'fid': data.get('userFid'), 'username': data.get('username')})
    game_request = NewGameRequest(difficulty=Difficulty(difficulty), player=player)
    game_id = str(uuid.uuid4())

    async def start_workflow():
        handle = await temporal_client.start_workflow(
            MinesweeperWorkflow.run,
            args=[game_id, game_request],
            id=game_id,
            task_queue=config.TASK_QUEUE,
        )
        return await query_with_retry(handle)

    try:
        game_state = asyncio.run(start_workflow())
    except Exception as error:
        logger.error(f"Error creating game: {error}")
        return jsonify({'error': 'Failed to create game'}), 500

    return jsonify({'gameState': serialize_snapshot(game_state)})


@app.route('/api/games/<game_id>', methods=['GET'])
def get_game_state(game_id):
    """Get game state."""
    async def query_game():
        handle = temporal_client.get_workflow_handle(game_id)
        return await query_with_retry(handle)

    try:
        game_state = asyncio.run(query_game())
    except Exception as error:
        logger.error(f"Error getting game state: {error}")
        return jsonify({'error': 'Game not found'}), 404

    return jsonify({'gameState': serialize_snapshot(game_state)})


@app.route('/api/games/<game_id>/moves', methods=['POST'])
def make_move(game_id):
    """Make a move."""
    data = json_body()
    if data is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    if not is_int(data.get('row')) or not is_int(data.get('col')) or data.get('action') not in ['reveal', 'flag']:
        return jsonify({'error': 'Invalid move request'}), 400

    move_request = MoveRequest(row=data['row'], col=data['col'], action=data['action'])

    async def execute_move():
        handle = temporal_client.get_workflow_handle(game_id)
        return await handle.execute_update(MinesweeperWorkflow.make_move_update, move_request)

    try:
        game_state = asyncio.run(execute_move())
    except Exception as error:
        if is_not_found(error):
            return jsonify({'error': 'Game not found'}), 404
        logger.error(f"Error making move: {error}")
        return jsonify({'error': 'Failed to make move'}), 500

    return jsonify({'gameState': serialize_snapshot(game_state)})


@app.route('/api/games/<game_id>/restart', methods=['POST'])
def restart_game(game_id):
    """Restart game, optionally switching difficulty."""
    data = json_body()
    if data is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    difficulty = data.get('difficulty')
    if difficulty not in Difficulty.values():
        return jsonify({'error': 'Invalid difficulty'}), 400

    async def execute_restart():
        handle = temporal_client.get_workflow_handle(game_id)
        return await handle.execute_update(MinesweeperWorkflow.restart_game_update, Difficulty(difficulty))

    try:
        game_state = asyncio.run(execute_restart())
    except Exception as error:
        if is_not_found(error):
            return jsonify({'error': 'Game not found'}), 404
        logger.error(f"Error restarting game: {error}")
        return jsonify({'error': 'Failed to restart game'}), 500

    return jsonify({'gameState': serialize_snapshot(game_state)})


@app.route('/.well-known/farcaster.json', methods=['GET'])
def manifest():
    """Mini app manifest for the hosting platform."""
    app_url = config.APP_URL or f"https://{request.host}"
    return jsonify(build_manifest(app_url))


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.now().isoformat()
    })


async def initialize_client():
    """Initialize Temporal client."""
    global temporal_client
    temporal_client = await get_temporal_client()
    logger.info("Connected to Temporal server")


def main():
    """Start the Flask server."""
    try:
        get_leaderboard()
        asyncio.run(initialize_client())

        logger.info(f"Minesweeper server running on http://localhost:{config.PORT}")
        logger.info("Make sure to start the Temporal worker in another terminal: python -m minisweeper.worker")

        app.run(host='0.0.0.0', port=config.PORT, debug=False)

    except Exception as error:
        logger.error(f"Failed to start server: {error}")
        exit(1)


if __name__ == "__main__":
    main()
