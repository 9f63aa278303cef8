# src/taskodoro/server/overlay_page.py

"""Overlay page for an OBS browser source. Listens to Socket.IO events."""

OVERLAY_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>Task Overlay</title>
  <script src="https://cdn.socket.io/4.7.5/socket.io.min.js"></script>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: sans-serif; background: transparent; color: #f1f5f9; padding: 15px; }
    .panel { background: rgba(30, 35, 50, 0.85); border-radius: 14px; padding: 14px 18px; margin-bottom: 12px; }
    .timer { font-size: 42px; font-weight: bold; }
    .timer.break { color: #86efac; }
    .timer.paused { opacity: 0.5; }
    .meta { font-size: 13px; color: #94a3b8; }
    .banner { font-size: 15px; margin-top: 6px; color: #fde68a; }
    ul { list-style: none; }
    li { padding: 4px 0; font-size: 16px; }
    li.done { text-decoration: line-through; color: #64748b; }
    li .user { font-size: 12px; color: #bae6fd; margin-left: 6px; }
  </style>
</head>
<body>
  <div class="panel">
    <div class="timer" id="timer">25:00</div>
    <div class="meta" id="meta"></div>
    <div class="banner" id="banner"></div>
  </div>
  <div class="panel"><ul id="tasks"></ul></div>
  <script>
    var tasks = [];
    var pomo = null;
    var lastSync = Date.now();

    function esc(t) {
      return String(t || "").replace(/&/g, "&amp;").replace(/</g, "&lt;").replace(/>/g, "&gt;");
    }
    function renderTasks() {
      document.getElementById("tasks").innerHTML = tasks.map(function(t) {
        return '<li class="' + (t.status === "done" ? "done" : "") + '">#' + t.id + " " +
          esc(t.text) + '<span class="user">' + esc(t.username) + "</span></li>";
      }).join("");
    }
    function renderTimer() {
      if (!pomo) return;
      var left = pomo.timeLeft;
      if (pomo.isActive) left = Math.max(0, left - Math.floor((Date.now() - lastSync) / 1000));
      var m = Math.floor(left / 60), s = left % 60;
      var el = document.getElementById("timer");
      el.textContent = m + ":" + (s < 10 ? "0" : "") + s;
      el.className = "timer" + (pomo.mode === "break" ? " break" : "") + (pomo.isActive ? "" : " paused");
      document.getElementById("meta").textContent =
        (pomo.mode === "work" ? "Work" : "Break") + " | session " + pomo.session;
    }
    function setPomo(p) { pomo = p; lastSync = Date.now(); renderTimer(); }
    function upsert(t) {
      var i = tasks.findIndex(function(x) { return x.id === t.id; });
      if (i === -1) tasks.push(t); else tasks[i] = t;
      renderTasks();
    }

    var socket = io();
    socket.on("tasksLoaded", function(list) { tasks = list || []; renderTasks(); });
    socket.on("taskAdded", upsert);
    socket.on("taskUpdated", upsert);
    socket.on("taskCompleted", upsert);
    socket.on("taskDeleted", function(t) {
      tasks = tasks.filter(function(x) { return x.id !== t.id; }); renderTasks();
    });
    socket.on("completedTasksCleared", function(removed) {
      var ids = new Set((removed || []).map(function(t) { return t.id; }));
      tasks = tasks.filter(function(x) { return !ids.has(x.id); }); renderTasks();
    });
    ["pomodoroStateLoaded", "pomodoroStarted", "pomodoroPaused", "pomodoroResumed",
     "pomodoroReset", "pomodoroTick"].forEach(function(name) { socket.on(name, setPomo); });
    ["pomodoroWorkCompleted", "pomodoroBreakCompleted"].forEach(function(name) {
      socket.on(name, function(data) {
        document.getElementById("banner").textContent = data.message || "";
        setPomo(data.pomodoro);
      });
    });
    setInterval(renderTimer, 250);
  </script>
</body>
</html>
"""
